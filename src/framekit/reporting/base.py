"""Reporter interface definitions and exit-code policy."""
from __future__ import annotations

from typing import List, Sequence

from framekit.core.results import Outcome, SuiteReport, TestResult
from framekit.core.models import TestCase

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ERRORS = 3
EXIT_FATAL = 4


class Reporter:
    """Interface for output renderers."""

    def on_start(self, cases: Sequence[TestCase]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_case_result(self, result: TestResult, index: int, total: int) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(self, report: SuiteReport) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def start(self, cases: Sequence[TestCase]) -> None:
        for reporter in self._reporters:
            reporter.on_start(cases)

    def handle_result(self, result: TestResult, index: int, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_case_result(result, index, total)

    def complete(self, report: SuiteReport) -> None:
        for reporter in self._reporters:
            reporter.on_complete(report)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)


def exit_code(report: SuiteReport) -> int:
    """Map a finished suite onto the process exit status."""

    if report.count(Outcome.ERRORED):
        return EXIT_ERRORS
    if report.all_passed:
        return EXIT_OK
    return EXIT_FAILURES
