import json
import textwrap

import pytest
from click.testing import CliRunner

from framekit import __version__
from framekit.cli.main import cli
from framekit.registry import clear_registry


@pytest.fixture(autouse=True)
def reset_registry(monkeypatch):
    monkeypatch.delenv("FRAMEKIT_PLUGINS", raising=False)
    monkeypatch.delenv("FRAMEKIT_CONFIG", raising=False)
    clear_registry()
    yield
    clear_registry()


def test_cli_help_short_flag() -> None:
    result = CliRunner().invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "--auto-run-tests" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"framekit {__version__}"


def test_headless_self_test_run_passes() -> None:
    result = CliRunner().invoke(cli, ["--test", "--headless", "--auto-run-tests", "--no-color"])
    assert result.exit_code == 0, result.output
    assert "ui.stack.cursor_hits_topmost -> PASSED" in result.output
    assert "failed=0 errored=0 timed_out=0" in result.output


def test_test_without_auto_run_lists_cases() -> None:
    result = CliRunner().invoke(cli, ["--test", "--headless", "--cases", "utility.*"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "utility.close - A quit event stops the frame loop."
    assert lines[1] == "utility.keeps_running"
    assert lines[-1] == "2 case(s)"


def test_unmatched_filter_is_a_failure() -> None:
    result = CliRunner().invoke(cli, ["--test", "--headless", "--auto-run-tests", "--cases", "nothing.*"])
    assert result.exit_code == 1
    assert "No cases matched" in result.output


def test_failing_plugin_case_sets_exit_code(tmp_path, monkeypatch) -> None:
    plugin = tmp_path / "framekit_failing_plugin.py"
    plugin.write_text(
        textwrap.dedent(
            """
            from framekit.core import Predicate, make_case

            def register(registry):
                registry.register(make_case("plugin.fails", expect=[Predicate("never", lambda o: False)]))
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.setenv("FRAMEKIT_PLUGINS", "framekit_failing_plugin")
    result = CliRunner().invoke(cli, ["--test", "--headless", "--auto-run-tests", "--cases", "plugin.*,utility.*"])
    assert result.exit_code == 1, result.output
    assert "plugin.fails -> FAILED" in result.output


def test_duplicate_plugin_case_is_fatal(tmp_path, monkeypatch) -> None:
    plugin = tmp_path / "framekit_duplicate_plugin.py"
    plugin.write_text(
        textwrap.dedent(
            """
            from framekit.core import make_case

            def register(registry):
                registry.register(make_case("utility.close"))
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.setenv("FRAMEKIT_PLUGINS", "framekit_duplicate_plugin")
    result = CliRunner().invoke(cli, ["--test", "--headless", "--auto-run-tests"])
    assert result.exit_code == 4
    assert "Test case 'utility.close' already registered" in result.output


def test_json_report_from_config(tmp_path) -> None:
    report_path = tmp_path / "report.json"
    config = tmp_path / "framekit.yaml"
    config.write_text(
        f"""
harness:
  cases: ["render.*"]
report:
  format: json
  path: {report_path.as_posix()}
""",
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["--test", "--headless", "--auto-run-tests", "--config", str(config)])
    assert result.exit_code == 0, result.output
    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert payload["summary"]["passed"] == payload["summary"]["total"] > 0
    assert all(case["name"].startswith("render.") for case in payload["cases"])


def test_invalid_config_is_fatal(tmp_path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("harness:\n  settle_frames: -1\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--test", "--headless", "--auto-run-tests", "--config", str(config)])
    assert result.exit_code == 4
    assert "schema validation failed" in result.output


def test_missing_driver_is_fatal(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("SDL_VIDEODRIVER")
    config = tmp_path / "drivers.yaml"
    config.write_text("harness:\n  drivers: [no-such-driver]\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--test", "--headless", "--auto-run-tests", "--config", str(config)])
    assert result.exit_code == 4
    assert "Unable to create a rendering context" in result.output


def test_interactive_path_runs_bounded_frames() -> None:
    result = CliRunner().invoke(cli, ["--headless", "--max-frames", "3"])
    assert result.exit_code == 0, result.output


def test_usage_error_exit_code() -> None:
    result = CliRunner().invoke(cli, ["--case-timeout", "0"])
    assert result.exit_code == 2
