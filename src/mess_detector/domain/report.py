"""Run report: violations bucketed by file and line, processing errors, run timing."""

import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol

from mess_detector.domain.rules import RuleViolation


@dataclass(frozen=True)
class ProcessingError:
    """A recoverable failure while analyzing one unit. Never aborts the run."""

    file_path: str
    message: str


class ViolationSink(Protocol):
    """Anything the dispatcher can record into."""

    def add_violation(self, violation: RuleViolation) -> None: ...

    def add_error(self, error: ProcessingError) -> None: ...


@dataclass
class UnitBatch:
    """Violations and errors produced by analyzing a single unit, in emission order."""

    file_path: str
    violations: list[RuleViolation] = field(default_factory=list)
    errors: list[ProcessingError] = field(default_factory=list)

    def add_violation(self, violation: RuleViolation) -> None:
        self.violations.append(violation)

    def add_error(self, error: ProcessingError) -> None:
        self.errors.append(error)


class Report:
    """
    Accumulates violations and errors for one run.

    Ordering is computed on read: all_violations() sorts by file path, then by
    begin line, and keeps insertion order among violations sharing both.
    """

    def __init__(self) -> None:
        self._violations: dict[str, dict[int, list[RuleViolation]]] = {}
        self._errors: list[ProcessingError] = []
        self._start_millis = 0.0
        self._end_millis = 0.0

    def add_violation(self, violation: RuleViolation) -> None:
        by_line = self._violations.setdefault(violation.file_path, {})
        by_line.setdefault(violation.begin_line, []).append(violation)

    def all_violations(self) -> list[RuleViolation]:
        return list(self.iter_violations())

    def iter_violations(self) -> Iterator[RuleViolation]:
        for file_path in sorted(self._violations):
            by_line = self._violations[file_path]
            for line in sorted(by_line):
                yield from by_line[line]

    def is_empty(self) -> bool:
        """True when no violation was ever added. Errors do not count."""
        return not self._violations

    def violation_count(self) -> int:
        return sum(
            len(bucket) for by_line in self._violations.values() for bucket in by_line.values()
        )

    def add_error(self, error: ProcessingError) -> None:
        self._errors.append(error)

    def errors(self) -> list[ProcessingError]:
        return list(self._errors)

    def has_errors(self) -> bool:
        return bool(self._errors)

    def merge(self, batch: UnitBatch) -> None:
        """Append one unit's results. The single aggregation point for parallel runs."""
        for violation in batch.violations:
            self.add_violation(violation)
        for error in batch.errors:
            self.add_error(error)

    def start(self) -> None:
        self._start_millis = time.time() * 1000.0

    def end(self) -> None:
        self._end_millis = time.time() * 1000.0

    def elapsed_millis(self) -> int:
        # Wall clock can step backwards between start() and end().
        return max(0, round(self._end_millis - self._start_millis))
