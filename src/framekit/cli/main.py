"""CLI entry point for framekit."""
from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence, Tuple

import click
from colorama import deinit as colorama_deinit, init as colorama_init

from framekit import __version__, bootstrap
from framekit.config import Settings, load_settings, resolve_config_path
from framekit.core import DisplayContextProvider, FramekitError, SuiteReport, TestCase, TestRunner
from framekit.display import create_display, open_display
from framekit.pipeline import run_interactive
from framekit.registry import registry
from framekit.reporting import (
    EXIT_FAILURES,
    EXIT_FATAL,
    EXIT_OK,
    JsonReporter,
    ReportManager,
    Reporter,
    TerminalReporter,
    exit_code,
)

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"framekit {__version__}")
    raise click.exceptions.Exit()


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--test", "test_mode", is_flag=True, help="Run the built-in self-test harness instead of the application.")
@click.option("--headless", is_flag=True, help="Render off-screen without an interactive window.")
@click.option("--auto-run-tests", is_flag=True, help="With --test, run every selected case without prompting.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="YAML settings file (defaults to $FRAMEKIT_CONFIG).",
)
@click.option("--cases", "case_filters", type=str, help="Comma-separated case name globs.")
@click.option("--list", "list_only", is_flag=True, help="List matched cases without running.")
@click.option(
    "--case-timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Per-case time budget in seconds.",
)
@click.option(
    "--suite-timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Time budget for the whole run in seconds.",
)
@click.option("--fail-fast", is_flag=True, help="Stop after the first case that does not pass.")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--max-frames",
    type=click.IntRange(min=1),
    help="Stop the interactive application after this many frames.",
)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the framekit version and exit.",
)
def cli(
    test_mode: bool,
    headless: bool,
    auto_run_tests: bool,
    config_path: Optional[str],
    case_filters: Optional[str],
    list_only: bool,
    case_timeout: Optional[float],
    suite_timeout: Optional[float],
    fail_fast: bool,
    report_format: Optional[str],
    report_path: Optional[str],
    no_color: bool,
    verbose: bool,
    max_frames: Optional[int],
) -> None:
    """Run the application, or its self-test harness with --test."""

    _configure_logging(verbose)
    try:
        settings = load_settings(resolve_config_path(config_path)).with_overrides(
            harness={
                "headless": True if headless else None,
                "case_timeout_s": case_timeout,
                "suite_timeout_s": suite_timeout,
                "fail_fast": True if fail_fast else None,
                "cases": _split_csv(case_filters) or None,
            },
            report={
                "format": report_format,
                "path": report_path,
                "color": False if no_color else None,
            },
        )
        bootstrap(registry)
        cases = registry.select(settings.harness.cases)
        if list_only or (test_mode and not auto_run_tests):
            _list_cases(cases)
            code = EXIT_OK
        elif test_mode:
            code = run_self_tests(cases, settings)
        else:
            code = run_application(settings, max_frames=max_frames)
    except FramekitError as exc:
        click.echo(f"framekit: {exc}", err=True)
        raise click.exceptions.Exit(EXIT_FATAL) from exc
    except click.exceptions.Exit:
        raise
    except Exception as exc:  # pragma: no cover - CLI error translation
        logger.debug("unexpected failure", exc_info=True)
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(code)


def run_self_tests(cases: Sequence[TestCase], settings: Settings) -> int:
    """Boot the display, run ``cases`` and report; returns the process exit code."""

    harness = settings.harness
    if not cases:
        click.echo("No cases matched the provided filters.")
        return EXIT_FAILURES
    colorama_init()
    try:
        with open_display(headless=harness.headless, size=harness.size, drivers=harness.drivers) as display:
            provider = DisplayContextProvider(display, frame_dt=harness.frame_dt)
            runner = TestRunner(
                case_timeout_s=harness.case_timeout_s,
                suite_timeout_s=harness.suite_timeout_s,
                settle_frames=harness.settle_frames,
                fail_fast=harness.fail_fast,
            )
            manager = ReportManager(_build_reporters(settings))
            manager.start(cases)
            report: SuiteReport = runner.run(cases, provider, on_result=manager.handle_result)
            manager.complete(report)
    finally:
        colorama_deinit()
    return exit_code(report)


def run_application(settings: Settings, *, max_frames: Optional[int] = None) -> int:
    harness = settings.harness
    display = create_display(headless=harness.headless, size=harness.size, drivers=harness.drivers)
    try:
        return run_interactive(
            display.window(),
            max_frames=max_frames,
            frame_dt=harness.frame_dt,
            present=not harness.headless,
        )
    finally:
        display.release()


def _build_reporters(settings: Settings) -> Tuple[Reporter, ...]:
    report = settings.report
    terminal = TerminalReporter(use_color=report.color, show_timing=report.show_timing)
    if report.format == "json":
        return (terminal, JsonReporter(report.json_path))
    return (terminal,)


def _list_cases(cases: Sequence[TestCase]) -> None:
    for case in cases:
        if case.description:
            click.echo(f"{case.name} - {case.description}")
        else:
            click.echo(case.name)
    click.echo(f"{len(cases)} case(s)")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("framekit").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="framekit", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
