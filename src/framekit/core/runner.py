"""Test runner driving scenarios through fresh run contexts."""
from __future__ import annotations

import contextlib
import logging
import signal
import threading
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from framekit.pipeline.clock import Clock, RealClock

from .context import RunContext, RunContextProvider
from .errors import CaseTimeout
from .models import TestCase
from .results import Outcome, SuiteReport, TestResult
from .validator import validate

logger = logging.getLogger(__name__)

DEFAULT_CASE_TIMEOUT_S = 10.0
DEFAULT_SUITE_TIMEOUT_S = 30.0
SUITE_TIMEOUT_REASON = "suite timeout exceeded"


class Watchdog:
    """Deadline for one case.

    ``check`` is polled before every step and frame. On POSIX, when running in
    the main thread, an interval timer also interrupts blocking Python code.
    """

    def __init__(self, clock: Clock, budget_s: Optional[float], *, use_alarm: bool = True) -> None:
        self._clock = clock
        self.budget_s = budget_s
        self._deadline = None if budget_s is None else clock.now() + budget_s
        self._use_alarm = use_alarm and budget_s is not None and _alarm_supported()

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return self._deadline - self._clock.now()

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        if self.expired():
            raise CaseTimeout(self.budget_s)

    @contextlib.contextmanager
    def armed(self) -> Iterator["Watchdog"]:
        if not self._use_alarm:
            yield self
            return
        remaining = self.remaining() or 0.0
        if remaining <= 0:
            raise CaseTimeout(self.budget_s)

        def _on_alarm(signum: int, frame: Any) -> None:
            left = self.remaining() or 0.0
            if left > 0:
                signal.setitimer(signal.ITIMER_REAL, left)
                return
            raise CaseTimeout(self.budget_s)

        previous = signal.signal(signal.SIGALRM, _on_alarm)
        signal.setitimer(signal.ITIMER_REAL, remaining)
        try:
            yield self
        finally:
            signal.setitimer(signal.ITIMER_REAL, 0)
            signal.signal(signal.SIGALRM, previous)


def _alarm_supported() -> bool:
    return hasattr(signal, "setitimer") and threading.current_thread() is threading.main_thread()


class TestRunner:
    """Executes a collection of test cases sequentially."""

    __test__ = False

    def __init__(
        self,
        *,
        case_timeout_s: Optional[float] = DEFAULT_CASE_TIMEOUT_S,
        suite_timeout_s: Optional[float] = DEFAULT_SUITE_TIMEOUT_S,
        settle_frames: int = 1,
        fail_fast: bool = False,
        clock: Optional[Clock] = None,
        use_alarm: bool = True,
    ) -> None:
        if settle_frames < 0:
            raise ValueError("settle_frames must be >= 0")
        self._case_timeout_s = case_timeout_s
        self._suite_timeout_s = suite_timeout_s
        self._settle_frames = settle_frames
        self._fail_fast = fail_fast
        self._clock = clock or RealClock()
        self._use_alarm = use_alarm

    def run(
        self,
        cases: Sequence[TestCase],
        provider: RunContextProvider,
        *,
        on_result: Optional[Callable[[TestResult, int, int], None]] = None,
    ) -> SuiteReport:
        results: List[TestResult] = []
        suite_start = self._clock.now()
        total = len(cases)
        for index, case in enumerate(cases, start=1):
            suite_remaining = self._suite_remaining(suite_start)
            if suite_remaining is not None and suite_remaining <= 0:
                result = TestResult(
                    name=case.name,
                    outcome=Outcome.TIMED_OUT,
                    duration_s=0.0,
                    reason=SUITE_TIMEOUT_REASON,
                )
            else:
                result = self._execute_case(case, provider, suite_remaining)
            results.append(result)
            logger.info("case %s finished: %s", case.name, result.outcome.value)
            if on_result:
                on_result(result, index, total)
            if self._fail_fast and not result.passed:
                break
        return SuiteReport(results=tuple(results), duration_s=self._clock.now() - suite_start)

    def _suite_remaining(self, suite_start: float) -> Optional[float]:
        if self._suite_timeout_s is None:
            return None
        return self._suite_timeout_s - (self._clock.now() - suite_start)

    def _case_budget(self, case: TestCase, suite_remaining: Optional[float]) -> tuple[Optional[float], bool]:
        budget = case.timeout_s if case.timeout_s is not None else self._case_timeout_s
        if suite_remaining is not None and (budget is None or suite_remaining < budget):
            return suite_remaining, True
        return budget, False

    def _execute_case(
        self,
        case: TestCase,
        provider: RunContextProvider,
        suite_remaining: Optional[float],
    ) -> TestResult:
        budget, limited_by_suite = self._case_budget(case, suite_remaining)
        start = self._clock.now()
        watchdog = Watchdog(self._clock, budget, use_alarm=self._use_alarm)
        context: Optional[RunContext] = None
        diagnostic: Dict[str, Any] = {}
        reason: Optional[str] = None
        try:
            with watchdog.armed():
                context = provider.open(case)
                context.watchdog = watchdog.check
                context.checkpoint()
                case.setup(context)
                for step in case.steps:
                    context.checkpoint()
                    step.apply(context)
                context.advance(self._settle_frames)
                observation = context.observe()
                verdict = validate(observation, case.expect)
            diagnostic.update(verdict.metrics)
            diagnostic["frame_checksum"] = observation.frame_checksum
            outcome = Outcome.PASSED if verdict.passed else Outcome.FAILED
            reason = verdict.reason
        except CaseTimeout:
            outcome = Outcome.TIMED_OUT
            if limited_by_suite:
                reason = SUITE_TIMEOUT_REASON
            else:
                reason = f"exceeded {budget:g}s budget"
        except AssertionError as exc:
            outcome = Outcome.FAILED
            reason = str(exc) or "assertion failed"
        except Exception as exc:
            logger.exception("case %s raised", case.name)
            outcome = Outcome.ERRORED
            reason = f"{type(exc).__name__}: {exc}"
        finally:
            if context is not None:
                diagnostic["frames"] = context.frames_rendered
                teardown_error = _close_quietly(context)
            else:
                teardown_error = None
        if teardown_error is not None and outcome is Outcome.PASSED:
            outcome = Outcome.ERRORED
            reason = f"teardown failed: {teardown_error}"
        duration = self._clock.now() - start
        return TestResult(
            name=case.name,
            outcome=outcome,
            duration_s=duration,
            reason=reason,
            diagnostic=diagnostic,
        )


def _close_quietly(context: RunContext) -> Optional[str]:
    try:
        context.close()
    except Exception as exc:
        logger.exception("teardown of %s failed", context.name)
        return f"{type(exc).__name__}: {exc}"
    return None
