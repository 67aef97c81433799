"""Unit tests for the Typer-based CLI interface."""

import json
from pathlib import Path
from unittest.mock import Mock

from typer.testing import CliRunner

from mess_detector.domain.config import ConfigurationLoader
from mess_detector.domain.report import ProcessingError, Report
from mess_detector.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from mess_detector.infrastructure.gateways.tree_dump_gateway import TreeDumpGateway
from mess_detector.infrastructure.renderers.json_renderer import JSONRenderer
from mess_detector.interface.cli import (
    EXIT_CLEAN,
    EXIT_PROCESSING_ERRORS,
    EXIT_USAGE_ERROR,
    EXIT_VIOLATIONS,
    CLIAppFactory,
    CLIDependencies,
)
from tests.unit.tree_test_utils import class_, method, statement, unit, var

runner = CliRunner()


def _make_deps(config: dict | None = None, **overrides) -> CLIDependencies:
    """CLIDependencies with real gateways and a mock telemetry port."""
    defaults: dict = {
        "config_loader": ConfigurationLoader(config),
        "telemetry": Mock(),
        "filesystem": FileSystemGateway(),
        "tree_loader": TreeDumpGateway(),
        "renderer": JSONRenderer(),
    }
    defaults.update(overrides)
    return CLIDependencies(**defaults)


def _write_dump(path: Path, root: dict) -> Path:
    path.write_text(json.dumps({"file": "src/Foo.php", "root": root}), encoding="utf-8")
    return path


def _dirty_dump(tmp_path: Path) -> Path:
    return _write_dump(tmp_path / "Foo.ast.json", unit(class_("Foo", method("bar", ["$a"]))))


def _clean_dump(tmp_path: Path) -> Path:
    return _write_dump(
        tmp_path / "Clean.ast.json",
        unit(class_("Foo", method("bar", ["$a"], [statement(var("$a"))]))),
    )


class TestExitCodes:
    def test_exit_code_for_report(self) -> None:
        assert CLIAppFactory.exit_code_for(Report()) == EXIT_CLEAN
        with_errors = Report()
        with_errors.add_error(ProcessingError("a.php", "boom"))
        assert CLIAppFactory.exit_code_for(with_errors) == EXIT_PROCESSING_ERRORS


class TestCheckCommand:
    def test_violations_exit_one_and_write_report_file(self, tmp_path: Path) -> None:
        dump = _dirty_dump(tmp_path)
        out = tmp_path / "reports" / "phpmd.json"
        deps = _make_deps()
        app = CLIAppFactory.create_app(deps)

        result = runner.invoke(app, ["check", str(dump), "--report-file", str(out)])

        assert result.exit_code == EXIT_VIOLATIONS
        document = json.loads(out.read_text(encoding="utf-8"))
        assert [f["file"] for f in document["files"]] == ["src/Foo.php"]
        assert document["files"][0]["violations"][0]["rule"] == "UnusedFormalParameter"
        deps.telemetry.handshake.assert_called_once()

    def test_clean_run_exits_zero_and_renders_to_stdout(self, tmp_path: Path) -> None:
        dump = _clean_dump(tmp_path)
        renderer = Mock()
        app = CLIAppFactory.create_app(_make_deps(renderer=renderer))

        result = runner.invoke(app, ["check", str(dump)])

        assert result.exit_code == EXIT_CLEAN
        renderer.write.assert_called_once()
        report = renderer.write.call_args.args[0]
        assert report.is_empty()

    def test_directory_is_expanded_by_configured_suffix(self, tmp_path: Path) -> None:
        _dirty_dump(tmp_path)
        _write_dump(tmp_path / "Other.tree", unit(class_("Bar", method("baz", ["$b"]))))
        out = tmp_path / "out.json"
        app = CLIAppFactory.create_app(_make_deps({"tree_suffix": ".tree"}))

        result = runner.invoke(app, ["check", str(tmp_path), "--report-file", str(out)])

        assert result.exit_code == EXIT_VIOLATIONS
        violations = json.loads(out.read_text(encoding="utf-8"))["files"][0]["violations"]
        assert [v["method"] for v in violations] == ["baz"]

    def test_report_file_from_config(self, tmp_path: Path) -> None:
        dump = _dirty_dump(tmp_path)
        out = tmp_path / "configured.json"
        app = CLIAppFactory.create_app(_make_deps({"report_file": str(out)}))

        result = runner.invoke(app, ["check", str(dump)])

        assert result.exit_code == EXIT_VIOLATIONS
        assert out.exists()

    def test_processing_errors_only_exit_two(self, tmp_path: Path) -> None:
        broken = tmp_path / "Broken.ast.json"
        broken.write_text("not json", encoding="utf-8")
        out = tmp_path / "out.json"
        app = CLIAppFactory.create_app(_make_deps())

        result = runner.invoke(app, ["check", str(broken), "--report-file", str(out)])

        assert result.exit_code == EXIT_PROCESSING_ERRORS
        document = json.loads(out.read_text(encoding="utf-8"))
        assert document["files"] == []
        assert document["errors"][0]["fileName"] == str(broken)

    def test_unknown_rule_exits_with_usage_error(self, tmp_path: Path) -> None:
        dump = _dirty_dump(tmp_path)
        deps = _make_deps()
        app = CLIAppFactory.create_app(deps)

        result = runner.invoke(app, ["check", str(dump), "--rules", "NoSuchRule"])

        assert result.exit_code == EXIT_USAGE_ERROR
        deps.telemetry.error.assert_called_once()
        assert "NoSuchRule" in deps.telemetry.error.call_args.args[0]

    def test_unknown_rule_from_config_exits_with_usage_error(self, tmp_path: Path) -> None:
        dump = _dirty_dump(tmp_path)
        app = CLIAppFactory.create_app(_make_deps({"rules": ["Bogus"]}))

        result = runner.invoke(app, ["check", str(dump)])

        assert result.exit_code == EXIT_USAGE_ERROR

    def test_jobs_option_gives_same_report(self, tmp_path: Path) -> None:
        dumps = [
            _write_dump(tmp_path / f"U{i}.ast.json", unit(class_("Foo", method("bar", [f"$p{i}"]))))
            for i in range(3)
        ]
        sequential = tmp_path / "seq.json"
        parallel = tmp_path / "par.json"
        app = CLIAppFactory.create_app(_make_deps())

        runner.invoke(app, ["check", *map(str, dumps), "--report-file", str(sequential)])
        runner.invoke(app, ["check", *map(str, dumps), "-j", "3", "--report-file", str(parallel)])

        assert json.loads(sequential.read_text())["files"] == json.loads(parallel.read_text())["files"]

    def test_jobs_below_one_is_rejected(self, tmp_path: Path) -> None:
        app = CLIAppFactory.create_app(_make_deps())
        result = runner.invoke(app, ["check", str(_dirty_dump(tmp_path)), "--jobs", "0"])
        assert result.exit_code == 2


class TestRulesCommand:
    def test_lists_catalog(self) -> None:
        app = CLIAppFactory.create_app(_make_deps())

        result = runner.invoke(app, ["rules"])

        assert result.exit_code == 0
        assert "UnusedFormalParameter [Unused Code Rules] priority=3 on: function, method" in result.output
        assert "https://phpmd.org/rules/unusedcode.html#unusedformalparameter" in result.output
