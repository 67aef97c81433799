"""Read-only node views over an arena-held syntax tree produced by an upstream parser."""

import dataclasses
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

from mess_detector.domain.errors import (
    NodeIndexError,
    NodeNotFoundError,
    NoParentError,
)

if TYPE_CHECKING:
    from mess_detector.domain.annotations import Annotations


class NodeKind(Enum):
    """Closed set of syntactic categories a tree node can carry."""

    COMPILATION_UNIT = "compilation_unit"
    NAMESPACE = "namespace"
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    FUNCTION = "function"
    METHOD = "method"
    CLOSURE = "closure"
    FORMAL_PARAMETERS = "formal_parameters"
    FORMAL_PARAMETER = "formal_parameter"
    VARIABLE_DECLARATOR = "variable_declarator"
    VARIABLE = "variable"
    COMPOUND_VARIABLE = "compound_variable"
    EXPRESSION = "expression"
    ARRAY_INDEX_EXPRESSION = "array_index_expression"
    STRING_INDEX_EXPRESSION = "string_index_expression"
    PROPERTY_POSTFIX = "property_postfix"
    METHOD_POSTFIX = "method_postfix"
    FUNCTION_POSTFIX = "function_postfix"
    MEMBER_PRIMARY_PREFIX = "member_primary_prefix"
    ARGUMENTS = "arguments"
    LITERAL = "literal"
    IDENTIFIER = "identifier"
    SCOPE = "scope"
    STATEMENT = "statement"
    ASSIGNMENT_EXPRESSION = "assignment_expression"
    RETURN_STATEMENT = "return_statement"
    SELF_REFERENCE = "self_reference"
    PARENT_REFERENCE = "parent_reference"
    STATIC_REFERENCE = "static_reference"

    @classmethod
    def from_tag(cls, tag: str) -> "NodeKind":
        """Resolve a kind tag from a tree dump. Raises ValueError for unknown tags."""
        return cls(tag)


DECLARATION_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.FUNCTION,
        NodeKind.METHOD,
        NodeKind.CLASS,
        NodeKind.INTERFACE,
        NodeKind.TRAIT,
    }
)
CALLABLE_KINDS: frozenset[NodeKind] = frozenset({NodeKind.FUNCTION, NodeKind.METHOD})
TYPE_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.CLASS, NodeKind.INTERFACE, NodeKind.TRAIT}
)

THIS_IMAGE = "$this"


@dataclass(frozen=True)
class NodeRecord:
    """One arena slot. Parent and children are indices into the same arena."""

    kind: NodeKind
    image: str
    begin_line: int
    end_line: int
    parent: int | None
    children: tuple[int, ...] = ()
    attributes: Mapping[str, object] = field(default_factory=dict)


class SyntaxTree:
    """Immutable arena of node records for one analyzed unit. Index 0 is the root."""

    def __init__(self, file_path: str, records: tuple[NodeRecord, ...]) -> None:
        if not records:
            raise ValueError("A syntax tree needs at least a root node.")
        self._file_path = file_path
        self._records = records

    @property
    def file_path(self) -> str:
        return self._file_path

    def __len__(self) -> int:
        return len(self._records)

    def record(self, index: int) -> NodeRecord:
        return self._records[index]

    def root(self) -> "Node":
        return self.node(0)

    def node(self, index: int) -> "Node":
        """Return the view for an arena index; declaration kinds get a DeclarationNode."""
        if self._records[index].kind in DECLARATION_KINDS:
            return DeclarationNode(self, index)
        return Node(self, index)

    def walk(self) -> Iterator["Node"]:
        """Yield every node in depth-first pre-order (source order)."""
        stack = [0]
        while stack:
            index = stack.pop()
            yield self.node(index)
            stack.extend(reversed(self._records[index].children))


class SyntaxTreeBuilder:
    """Appends records in pre-order and freezes them into a SyntaxTree."""

    def __init__(self, file_path: str) -> None:
        self._file_path = file_path
        self._slots: list[NodeRecord] = []
        self._children: list[list[int]] = []

    def add(
        self,
        kind: NodeKind,
        image: str = "",
        begin_line: int = 0,
        end_line: int | None = None,
        parent: int | None = None,
        attributes: Mapping[str, object] | None = None,
    ) -> int:
        """Add a node under ``parent`` (None only for the root) and return its index."""
        if parent is None and self._slots:
            raise ValueError("Only the first node may be added without a parent.")
        if parent is not None and not 0 <= parent < len(self._slots):
            raise ValueError(f"Unknown parent index {parent}.")
        index = len(self._slots)
        self._slots.append(
            NodeRecord(
                kind=kind,
                image=image,
                begin_line=begin_line,
                end_line=begin_line if end_line is None else end_line,
                parent=parent,
                attributes=MappingProxyType(dict(attributes or {})),
            )
        )
        self._children.append([])
        if parent is not None:
            self._children[parent].append(index)
        return index

    def build(self) -> SyntaxTree:
        records = tuple(
            dataclasses.replace(slot, children=tuple(children))
            for slot, children in zip(self._slots, self._children)
        )
        return SyntaxTree(self._file_path, records)


class DescendantsOfKind:
    """
    Lazy, restartable view of all descendants of one kind, depth-first pre-order.

    Every call to iter() starts a fresh walk of the current subtree.
    """

    def __init__(self, node: "Node", kind: NodeKind) -> None:
        self._node = node
        self._kind = kind

    def __iter__(self) -> Iterator["Node"]:
        for descendant in self._node.descendants():
            if descendant.kind is self._kind:
                yield descendant

    def first(self) -> "Node | None":
        return next(iter(self), None)


class Node:
    """Read-only view of one arena slot. Holds no references besides the arena."""

    __slots__ = ("_index", "_tree")

    def __init__(self, tree: SyntaxTree, index: int) -> None:
        self._tree = tree
        self._index = index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._tree is other._tree and self._index == other._index

    def __hash__(self) -> int:
        return hash((id(self._tree), self._index))

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self.kind.value} {self.image!r} "
            f"{self.file_path}:{self.begin_line}>"
        )

    @property
    def _record(self) -> NodeRecord:
        return self._tree.record(self._index)

    @property
    def index(self) -> int:
        return self._index

    @property
    def tree(self) -> SyntaxTree:
        return self._tree

    @property
    def kind(self) -> NodeKind:
        return self._record.kind

    @property
    def image(self) -> str:
        """Textual token of this node (variable name with sigil, literal text, ...)."""
        return self._record.image

    @property
    def file_path(self) -> str:
        return self._tree.file_path

    @property
    def begin_line(self) -> int:
        return self._record.begin_line

    @property
    def end_line(self) -> int:
        return self._record.end_line

    def attribute(self, name: str, default: object = None) -> object:
        return self._record.attributes.get(name, default)

    # Navigation

    def has_parent(self) -> bool:
        return self._record.parent is not None

    def parent(self) -> "Node":
        """Enclosing node. Raises NoParentError at the tree root."""
        parent = self._record.parent
        if parent is None:
            raise NoParentError(f"{self!r} is the tree root and has no parent.")
        return self._tree.node(parent)

    def ancestors(self) -> Iterator["Node"]:
        """Yield enclosing nodes from the parent up to the root."""
        parent = self._record.parent
        while parent is not None:
            yield self._tree.node(parent)
            parent = self._tree.record(parent).parent

    def child_count(self) -> int:
        return len(self._record.children)

    def child(self, position: int) -> "Node":
        """The child at ``position``. Raises NodeIndexError if there is none."""
        children = self._record.children
        if not 0 <= position < len(children):
            raise NodeIndexError(
                f"{self!r} has {len(children)} children; no child at {position}."
            )
        return self._tree.node(children[position])

    def children(self) -> list["Node"]:
        return [self._tree.node(index) for index in self._record.children]

    def descendants(self) -> Iterator["Node"]:
        """Yield every node below this one in depth-first pre-order."""
        stack = list(reversed(self._record.children))
        while stack:
            index = stack.pop()
            yield self._tree.node(index)
            stack.extend(reversed(self._tree.record(index).children))

    def first_child_of_kind(self, kind: NodeKind) -> "Node | None":
        """First descendant of ``kind`` in pre-order, or None when there is none."""
        return DescendantsOfKind(self, kind).first()

    def require_child_of_kind(self, kind: NodeKind) -> "Node":
        found = self.first_child_of_kind(kind)
        if found is None:
            raise NodeNotFoundError(f"{self!r} has no descendant of kind {kind.value}.")
        return found

    def find_children_of_kind(self, kind: NodeKind) -> DescendantsOfKind:
        return DescendantsOfKind(self, kind)

    def enclosing(self, kinds: frozenset[NodeKind]) -> "Node | None":
        """Nearest ancestor whose kind is in ``kinds``."""
        for ancestor in self.ancestors():
            if ancestor.kind in kinds:
                return ancestor
        return None

    # Classification

    def is_kind(self, kind: NodeKind) -> bool:
        """Exact kind equality, no family matching."""
        return self._record.kind is kind

    def is_this(self) -> bool:
        """True only for the implicit receiver reference."""
        return self.is_kind(NodeKind.VARIABLE) and self.image == THIS_IMAGE

    def is_static(self) -> bool:
        return bool(self.attribute("static", False))


class DeclarationNode(Node):
    """Function, method or type declaration."""

    __slots__ = ()

    @property
    def simple_name(self) -> str:
        return self.image

    @property
    def doc_comment(self) -> str:
        return str(self.attribute("docComment", "") or "")

    @property
    def annotations(self) -> "Annotations":
        from mess_detector.domain.annotations import Annotations

        return Annotations.from_doc_comment(self.doc_comment)

    def parameter_count(self) -> int:
        parameters = None
        for child in self.children():
            if child.is_kind(NodeKind.FORMAL_PARAMETERS):
                parameters = child
                break
        if parameters is None:
            return 0
        return sum(1 for _ in parameters.find_children_of_kind(NodeKind.VARIABLE_DECLARATOR))

    def is_abstract(self) -> bool:
        return bool(self.attribute("abstract", False))

    def is_declaration(self) -> bool:
        """False when this signature only restates an inherited or interface one."""
        return bool(self.attribute("declaration", True))

    def is_callable(self) -> bool:
        return self.kind in CALLABLE_KINDS

    def is_type(self) -> bool:
        return self.kind in TYPE_KINDS
