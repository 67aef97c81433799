"""Shared vocabulary for rules that reason about local variables."""

from typing import ClassVar

from mess_detector.domain.nodes import Node, NodeKind
from mess_detector.domain.rules import Rule

INDEX_EXPRESSION_KINDS = frozenset(
    {NodeKind.ARRAY_INDEX_EXPRESSION, NodeKind.STRING_INDEX_EXPRESSION}
)


class LocalVariableRule(Rule):
    """Base for rules that rely on local variables."""

    # Available in every scope, so never a local variable.
    SUPER_GLOBALS: ClassVar[frozenset[str]] = frozenset(
        {
            "$argc",
            "$argv",
            "$_COOKIE",
            "$_ENV",
            "$_FILES",
            "$_GET",
            "$_POST",
            "$_REQUEST",
            "$_SERVER",
            "$_SESSION",
            "$GLOBALS",
            "$HTTP_RAW_POST_DATA",
            "$php_errormsg",
            "$http_response_header",
        }
    )

    def is_local(self, variable: Node) -> bool:
        return (
            not variable.is_this()
            and self.is_not_super_global(variable)
            and self.is_regular_variable(variable)
        )

    def is_not_super_global(self, variable: Node) -> bool:
        return variable.image not in self.SUPER_GLOBALS

    def is_regular_variable(self, variable: Node) -> bool:
        """
        False when the reference is the receiver of a static property access.

        ``$class::$property`` names a class through a variable; it is not a read
        of the variable as a value.
        """
        node = self.strip_wrapped_index_expression(variable)
        if not node.has_parent():
            return True
        parent = node.parent()
        if not parent.is_kind(NodeKind.PROPERTY_POSTFIX):
            return True
        if not parent.has_parent():
            return True
        primary_prefix = parent.parent()
        if primary_prefix.has_parent():
            outer = primary_prefix.parent()
            if outer.is_kind(NodeKind.MEMBER_PRIMARY_PREFIX):
                return not outer.is_static()
        return parent.child(0) != node or not primary_prefix.is_static()

    def strip_wrapped_index_expression(self, node: Node) -> Node:
        """Climb out of index expressions while ``node`` is their first child."""
        while self.is_wrapped_by_index_expression(node):
            parent = node.parent()
            if parent.child(0) != node:
                break
            node = parent
        return node

    def is_wrapped_by_index_expression(self, node: Node) -> bool:
        return node.has_parent() and node.parent().kind in INDEX_EXPRESSION_KINDS

    @staticmethod
    def is_function_name_ending_with(node: Node, name: str) -> bool:
        """
        Case-insensitive match on the last segment of a qualified function name.

        The parser prefixes global functions called from a namespace with that
        namespace, so ``\\App\\compact`` still names ``compact``.
        """
        last_segment = node.image.strip("\\").split("\\")[-1]
        return last_segment.lower() == name.lower()
