"""UnusedFormalParameter: parameters never referenced in the callable's body."""

import re
from typing import ClassVar

from mess_detector.domain.nodes import CALLABLE_KINDS, DeclarationNode, Node, NodeKind
from mess_detector.domain.rules import RuleViolation
from mess_detector.domain.rules.local_variable import LocalVariableRule

VARIADIC_INTROSPECTION_FUNCTION = "func_get_args"
COMPACT_FUNCTION = "compact"


class _PendingParameters:
    """Declared-but-unseen parameters, keyed by name in first-seen order."""

    def __init__(self) -> None:
        self._declarators: dict[str, Node] = {}

    def add(self, declarator: Node) -> None:
        self._declarators.setdefault(declarator.image, declarator)

    def discard(self, name: str) -> None:
        self._declarators.pop(name, None)

    def clear(self) -> None:
        self._declarators.clear()

    def remaining(self) -> list[Node]:
        return list(self._declarators.values())


class UnusedFormalParameterRule(LocalVariableRule):
    """Reports every formal parameter of a function or method that its body never uses."""

    name: ClassVar[str] = "UnusedFormalParameter"
    ruleset_name: ClassVar[str] = "Unused Code Rules"
    priority: ClassVar[int] = 3
    external_info_url: ClassVar[str] = (
        "https://phpmd.org/rules/unusedcode.html#unusedformalparameter"
    )
    message: ClassVar[str] = "Avoid unused parameters such as '{0}'."
    description: ClassVar[str] = (
        "Avoid passing parameters to methods or constructors and then not using those parameters."
    )
    capabilities: ClassVar[frozenset[NodeKind]] = CALLABLE_KINDS

    # Runtime rejects malformed signatures for these, so unused parameters are expected.
    MAGIC_METHOD_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"__(?:call|callStatic|get|set|isset|unset|set_state)", re.IGNORECASE
    )
    INHERITDOC_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"@inheritdoc", re.IGNORECASE)

    def check(self, node: Node) -> list[RuleViolation]:
        """Check a function or method declaration. Returns one violation per unused parameter."""
        if not isinstance(node, DeclarationNode) or not self.applies_to(node):
            return []
        if self._is_exempt_method(node):
            return []

        pending = _PendingParameters()
        self._collect_parameters(node, pending)
        self._remove_used_parameters(node, pending)
        return [
            self.build_violation(declarator, declarator.image)
            for declarator in pending.remaining()
        ]

    def _is_exempt_method(self, node: DeclarationNode) -> bool:
        """Abstract, magic, {@inheritdoc} and restated method signatures are skipped."""
        if not node.is_kind(NodeKind.METHOD):
            return False
        return (
            node.is_abstract()
            or bool(self.MAGIC_METHOD_PATTERN.search(node.simple_name))
            or bool(self.INHERITDOC_PATTERN.search(node.doc_comment))
            or not node.is_declaration()
        )

    def _collect_parameters(self, node: DeclarationNode, pending: _PendingParameters) -> None:
        parameters = node.first_child_of_kind(NodeKind.FORMAL_PARAMETERS)
        if parameters is None:
            return
        for declarator in parameters.find_children_of_kind(NodeKind.VARIABLE_DECLARATOR):
            pending.add(declarator)

    def _remove_used_parameters(self, node: DeclarationNode, pending: _PendingParameters) -> None:
        for variable in node.find_children_of_kind(NodeKind.VARIABLE):
            if self.is_regular_variable(variable):
                pending.discard(variable.image)

        for compound in node.find_children_of_kind(NodeKind.COMPOUND_VARIABLE):
            prefix = compound.image
            for expression in compound.find_children_of_kind(NodeKind.EXPRESSION):
                pending.discard(prefix + expression.image)

        for call in node.find_children_of_kind(NodeKind.FUNCTION_POSTFIX):
            # func_get_args() can reach every parameter.
            if self.is_function_name_ending_with(call, VARIADIC_INTROSPECTION_FUNCTION):
                pending.clear()
            if not self.is_function_name_ending_with(call, COMPACT_FUNCTION):
                continue
            for literal in call.find_children_of_kind(NodeKind.LITERAL):
                pending.discard("$" + literal.image.strip("\"'"))
