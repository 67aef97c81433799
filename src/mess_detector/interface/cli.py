"""CLI entry points for mess-detector - Thin Controller using Typer."""

import sys
from dataclasses import dataclass
from pathlib import Path

import typer

from mess_detector.domain.config import ConfigurationLoader
from mess_detector.domain.errors import UnknownRuleError
from mess_detector.domain.protocols import (
    FileSystemProtocol,
    RendererProtocol,
    TelemetryPort,
    TreeLoaderProtocol,
)
from mess_detector.domain.report import Report
from mess_detector.domain.rules.catalog import RuleCatalog
from mess_detector.interface.telemetry import ProjectTelemetry
from mess_detector.use_cases.analyze_units import AnalyzeUnitsUseCase

EXIT_CLEAN = 0
EXIT_VIOLATIONS = 1
EXIT_PROCESSING_ERRORS = 2
EXIT_USAGE_ERROR = 3


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    tree_loader: TreeLoaderProtocol
    renderer: RendererProtocol


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def exit_code_for(report: Report) -> int:
        """Violations win over processing errors; a clean run exits 0."""
        if not report.is_empty():
            return EXIT_VIOLATIONS
        if report.has_errors():
            return EXIT_PROCESSING_ERRORS
        return EXIT_CLEAN

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="mess-detector",
            help="Rule-based static analysis over parser tree dumps. Run 'mess-detector check PATH...'.",
            add_completion=False,
        )

        @app.command()
        def check(
            paths: list[Path] = typer.Argument(..., help="Tree dump files or directories to analyze"),  # noqa: B008
            rules: list[str] | None = typer.Option(  # noqa: B008
                None, "--rules", "-r", help="Rule name to run (repeatable; default: config or all)"
            ),
            jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Worker threads"),
            report_file: Path | None = typer.Option(  # noqa: B008
                None, "--report-file", help="Write the JSON report here instead of stdout"
            ),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
        ) -> None:
            """Analyze tree dumps and render the JSON report."""
            ProjectTelemetry.configure_logging(verbose=verbose)
            deps.telemetry.handshake()
            config = deps.config_loader
            selected = rules or config.rules
            try:
                rule_factory = RuleCatalog.factory_for(selected)
            except UnknownRuleError as exc:
                deps.telemetry.error(str(exc))
                sys.exit(EXIT_USAGE_ERROR)

            files = deps.filesystem.collect_files([str(p) for p in paths], config.tree_suffix)
            use_case = AnalyzeUnitsUseCase(
                tree_loader=deps.tree_loader,
                rule_factory=rule_factory,
                telemetry=deps.telemetry,
            )
            report = use_case.execute(files, jobs=jobs or config.jobs)

            target = report_file or (Path(config.report_file) if config.report_file else None)
            if target is None:
                deps.renderer.write(report, sys.stdout)
            else:
                deps.filesystem.write_text(str(target), deps.renderer.render(report))
                deps.telemetry.step(f"Report written to: {target}")
            sys.exit(CLIAppFactory.exit_code_for(report))

        @app.command(name="rules")
        def list_rules() -> None:
            """List the rules in the built-in catalog."""
            for rule in RuleCatalog.create():
                kinds = ", ".join(sorted(kind.value for kind in rule.capabilities))
                typer.echo(
                    f"{rule.name} [{rule.ruleset_name}] priority={rule.priority} on: {kinds}"
                )
                typer.echo(f"    {rule.description}")
                typer.echo(f"    {rule.external_info_url}")

        return app
