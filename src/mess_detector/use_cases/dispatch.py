"""Rule dispatch over one unit's syntax tree."""

import logging
from collections.abc import Sequence

from mess_detector.domain.nodes import Node, SyntaxTree
from mess_detector.domain.report import ProcessingError, ViolationSink
from mess_detector.domain.rules import Rule
from mess_detector.domain.suppression import SuppressionMatcher

logger = logging.getLogger(__name__)


class RuleDispatcher:
    """
    Walks a tree in source order and invokes each rule on nodes within its capabilities.

    Suppressed violations are dropped before they reach the sink. A fault in one
    (rule, node) pair becomes a ProcessingError and the walk continues.
    """

    def __init__(self, rules: Sequence[Rule], sink: ViolationSink) -> None:
        self._rules = list(rules)
        self._sink = sink
        self._suppression = SuppressionMatcher()

    def dispatch(self, tree: SyntaxTree) -> None:
        for node in tree.walk():
            for rule in self._rules:
                if rule.applies_to(node):
                    self._apply(rule, node)

    def _apply(self, rule: Rule, node: Node) -> None:
        if self._suppression.is_suppressed(rule, node):
            logger.debug("%s suppressed on %r", rule.name, node)
            return
        try:
            violations = list(rule.check(node))
        except Exception as exc:  # a rule defect must never abort the run
            message = f"{rule.name}: {type(exc).__name__}: {exc}"
            logger.warning("Rule failure in %s at line %s: %s", node.file_path, node.begin_line, message)
            logger.debug("Rule failure traceback", exc_info=True)
            self._sink.add_error(ProcessingError(node.file_path, message))
            return
        for violation in violations:
            if self._suppression.is_suppressed(rule, violation.node):
                continue
            self._sink.add_violation(violation)
