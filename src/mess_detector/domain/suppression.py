"""Scope resolution for @SuppressWarnings annotations."""

from typing import TYPE_CHECKING

from mess_detector.domain.annotations import Annotations
from mess_detector.domain.nodes import DECLARATION_KINDS, DeclarationNode, Node

if TYPE_CHECKING:
    from mess_detector.domain.rules import Rule


class SuppressionMatcher:
    """
    Decides whether a rule is silenced for a node.

    Walks from the node outward through every enclosing declaration, innermost
    first; the first declaration whose annotations suppress the rule decides.
    Each declaration's doc comment is parsed once per matcher, so one matcher
    serves a whole dispatch.
    """

    def __init__(self) -> None:
        self._annotations: dict[Node, Annotations] = {}

    def annotations_for(self, declaration: DeclarationNode) -> Annotations:
        annotations = self._annotations.get(declaration)
        if annotations is None:
            annotations = declaration.annotations
            self._annotations[declaration] = annotations
        return annotations

    def suppressing_declaration(self, rule: "Rule", node: Node) -> DeclarationNode | None:
        """Innermost declaration (the node itself included) that suppresses ``rule``."""
        candidate: Node | None = node
        if node.kind not in DECLARATION_KINDS:
            candidate = node.enclosing(DECLARATION_KINDS)
        while candidate is not None:
            if isinstance(candidate, DeclarationNode):
                if self.annotations_for(candidate).suppresses(rule):
                    return candidate
            candidate = candidate.enclosing(DECLARATION_KINDS)
        return None

    def is_suppressed(self, rule: "Rule", node: Node) -> bool:
        return self.suppressing_declaration(rule, node) is not None
