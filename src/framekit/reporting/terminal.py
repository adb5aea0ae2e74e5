"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

from typing import Sequence

import click

from framekit.core.models import TestCase
from framekit.core.results import SuiteReport, TestResult

from .base import Reporter, exit_code


STATUS_COLORS = {
    "passed": "green",
    "failed": "red",
    "errored": "yellow",
    "timed_out": "magenta",
}


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout.

    With ``show_timing=False`` the output is a pure function of the report,
    which keeps it comparable between runs.
    """

    def __init__(self, *, use_color: bool = True, show_timing: bool = True) -> None:
        self._use_color = use_color
        self._show_timing = show_timing
        self._failures: list[tuple[int, TestResult]] = []

    def on_start(self, cases: Sequence[TestCase]) -> None:
        self._failures.clear()
        click.echo(self._styled(f"Starting self-test run: {len(cases)} case(s)", force_color="cyan"))

    def on_case_result(self, result: TestResult, index: int, total: int) -> None:
        status_text = self._styled(result.outcome.value.upper(), status=result.outcome.value)
        line = f"[{index}/{total}] {result.name} -> {status_text}"
        if self._show_timing:
            line += f" ({result.duration_s * 1000:.2f} ms)"
        click.echo(line)
        if not result.passed:
            self._failures.append((index, result))
            if result.reason:
                click.echo(f"    reason: {result.reason}")

    def on_complete(self, report: SuiteReport) -> None:
        counts = report.summary()
        summary = (
            f"Summary: total={counts['total']} passed={counts['passed']} failed={counts['failed']} "
            f"errored={counts['errored']} timed_out={counts['timed_out']}"
        )
        if self._show_timing:
            summary += f" duration={report.duration_s:.2f}s"
        click.echo(self._styled(summary, force_color="cyan"))
        groups = report.groups()
        if groups:
            click.echo("Groups:")
            for group in groups:
                mark = self._styled("ok", force_color="green") if group.ok else self._styled("FAIL", force_color="red")
                click.echo(f"  {group.name}: {group.passed}/{group.total} {mark}")
        if self._failures:
            click.echo(self._styled("Failure details:", force_color="red"))
            for index, result in self._failures:
                click.echo(f"  [{index}] {result.name} -> {result.outcome.value}")
                self._print_failure_details(result, indent="    ")
        click.echo(f"Exit code: {exit_code(report)}")

    def _styled(self, text: str, *, status: str | None = None, force_color: str | None = None) -> str:
        if not self._use_color:
            return text
        color = force_color or STATUS_COLORS.get(status or text.lower())
        if color:
            return click.style(text, fg=color)
        return text

    def _print_failure_details(self, result: TestResult, *, indent: str = "    ") -> None:
        if result.reason:
            click.echo(f"{indent}reason: {result.reason}")
        diagnostic = result.diagnostic
        if not diagnostic:
            return
        frames = diagnostic.get("frames")
        if frames is not None:
            click.echo(f"{indent}frames rendered: {frames}")
        checksum = diagnostic.get("frame_checksum")
        if checksum:
            click.echo(f"{indent}frame sha256: {checksum}")
        for key in sorted(diagnostic):
            if key in ("frames", "frame_checksum"):
                continue
            value = diagnostic[key]
            if isinstance(value, float):
                click.echo(f"{indent}{key}={value:.3e}")
            else:
                click.echo(f"{indent}{key}={value}")
