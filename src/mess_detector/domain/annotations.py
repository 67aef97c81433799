"""Doc-comment annotations and the @SuppressWarnings matcher."""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from mess_detector.domain.rules import Rule

SUPPRESS_ANNOTATION = "suppresswarnings"
TOOL_NAMES = frozenset({"PHPMD", "PMD"})


@dataclass(frozen=True, init=False)
class Annotation:
    """A ``@Name(value)`` directive. The value is trimmed of quotes and spaces."""

    name: str
    value: str

    def __init__(self, name: str, value: str) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "value", value.strip('" '))

    def suppresses(self, rule: "Rule") -> bool:
        if self.name.lower() != SUPPRESS_ANNOTATION:
            return False
        return self._is_suppressed(rule)

    def _is_suppressed(self, rule: "Rule") -> bool:
        """Tool name, then qualified rule id, then loose substring. First hit wins."""
        if self.value in TOOL_NAMES:
            return True
        if re.match(rf"(PH)?PMD\.{re.escape(rule.name)}", self.value):
            return True
        return self.value.lower() in rule.name.lower()


class Annotations:
    """All annotations parsed from one doc comment."""

    _PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"@([a-z_][a-z0-9_]+)\(([^)]+)\)", re.IGNORECASE
    )

    def __init__(self, annotations: list[Annotation] | None = None) -> None:
        self._annotations = list(annotations or [])

    @classmethod
    def from_doc_comment(cls, doc_comment: str | None) -> "Annotations":
        """Parse every ``@Name(value)`` match; text that matches nothing gives an empty set."""
        if not doc_comment:
            return cls()
        return cls(
            [
                Annotation(match.group(1), match.group(2))
                for match in cls._PATTERN.finditer(doc_comment)
            ]
        )

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self._annotations)

    def __len__(self) -> int:
        return len(self._annotations)

    def suppresses(self, rule: "Rule") -> bool:
        return any(annotation.suppresses(rule) for annotation in self._annotations)
