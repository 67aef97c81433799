"""Domain models for rules and violations."""

from dataclasses import dataclass

__all__ = [
    "Checkable",
    "Rule",
    "RuleViolation",
]

from typing import ClassVar, Protocol

from mess_detector.domain.nodes import CALLABLE_KINDS, Node, NodeKind, TYPE_KINDS


@dataclass(frozen=True)
class RuleViolation:
    """A rule finding attached to a node, with its container context."""

    rule: "Rule"
    node: Node
    file_path: str
    begin_line: int
    end_line: int
    description: str
    namespace_name: str | None = None
    class_name: str | None = None
    function_name: str | None = None
    method_name: str | None = None
    message_args: tuple[str, ...] = ()

    @classmethod
    def from_node(
        cls, rule: "Rule", node: Node, message_args: tuple[str, ...] = ()
    ) -> "RuleViolation":
        """Build a violation with position and container names derived from ``node``."""
        namespace_name = class_name = function_name = method_name = None
        for scope in (node, *node.ancestors()):
            kind = scope.kind
            if kind is NodeKind.NAMESPACE and namespace_name is None:
                namespace_name = scope.image
            elif kind in TYPE_KINDS and class_name is None:
                class_name = scope.image
            elif kind is NodeKind.METHOD and method_name is None:
                method_name = scope.image
            elif kind is NodeKind.FUNCTION and function_name is None:
                function_name = scope.image
        return cls(
            rule=rule,
            node=node,
            file_path=node.file_path,
            begin_line=node.begin_line,
            end_line=node.end_line,
            description=rule.message.format(*message_args),
            namespace_name=namespace_name,
            class_name=class_name,
            function_name=function_name,
            method_name=method_name,
            message_args=message_args,
        )


class Checkable(Protocol):
    """Given an applicable node, return violations. Never records anything itself."""

    name: str
    capabilities: frozenset[NodeKind]

    def check(self, node: Node) -> list[RuleViolation]:
        """Interrogate a node for one kind of finding."""
        ...


class Rule(Checkable):
    """
    Base class for catalog rules.

    Subclasses set the class attributes and implement check(). check() must be
    pure per call: any scratch state lives in locals so a rule instance can be
    invoked for many declarations, one after another, without cross-talk.
    """

    name: ClassVar[str] = ""
    ruleset_name: ClassVar[str] = ""
    priority: ClassVar[int] = 3
    external_info_url: ClassVar[str] = ""
    message: ClassVar[str] = ""
    description: ClassVar[str] = ""
    capabilities: ClassVar[frozenset[NodeKind]] = CALLABLE_KINDS

    def applies_to(self, node: Node) -> bool:
        return node.kind in self.capabilities

    def build_violation(self, node: Node, *message_args: str) -> RuleViolation:
        return RuleViolation.from_node(self, node, tuple(message_args))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
