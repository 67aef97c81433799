"""Use Case: Analyze Units - load each tree dump, dispatch rules, aggregate one Report."""

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from mess_detector.domain.errors import TreeLoadError
from mess_detector.domain.protocols import TelemetryPort, TreeLoaderProtocol
from mess_detector.domain.report import ProcessingError, Report, UnitBatch
from mess_detector.domain.rules import Rule
from mess_detector.use_cases.dispatch import RuleDispatcher


class AnalyzeUnitsUseCase:
    """Orchestrate one analysis run over many units and return its Report."""

    def __init__(
        self,
        tree_loader: TreeLoaderProtocol,
        rule_factory: Callable[[], list[Rule]],
        telemetry: TelemetryPort,
    ) -> None:
        self.tree_loader = tree_loader
        self.rule_factory = rule_factory
        self.telemetry = telemetry

    def execute(self, file_paths: Sequence[str], jobs: int = 1) -> Report:
        """
        Analyze every unit and return the aggregated report.

        Args:
            file_paths: Tree dumps to analyze, one unit each.
            jobs: Worker threads. Each unit gets its own rule instances and its
                batch is merged by this thread in input order, so the report is
                identical for any value.
        """
        report = Report()
        report.start()
        self.telemetry.step(f"Analyzing {len(file_paths)} unit(s) with {jobs} worker(s)...")
        if jobs > 1 and len(file_paths) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                batches = list(executor.map(self.analyze_unit, file_paths))
        else:
            batches = [self.analyze_unit(path) for path in file_paths]
        for batch in batches:
            report.merge(batch)
        report.end()
        self.telemetry.step(
            f"Found {report.violation_count()} violation(s) and "
            f"{len(report.errors())} processing error(s) in {report.elapsed_millis()} ms."
        )
        return report

    def analyze_unit(self, file_path: str) -> UnitBatch:
        """Analyze one unit with fresh rule instances."""
        batch = UnitBatch(file_path)
        try:
            tree = self.tree_loader.load(file_path)
        except TreeLoadError as exc:
            self.telemetry.error(f"Could not load {exc.file_path}: {exc.message}")
            batch.add_error(ProcessingError(exc.file_path, exc.message))
            return batch
        RuleDispatcher(self.rule_factory(), batch).dispatch(tree)
        return batch
