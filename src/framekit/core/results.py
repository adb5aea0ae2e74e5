"""Result data structures produced by the test runner."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


class Outcome(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class TestResult:
    """Outcome of executing a single test case."""

    __test__ = False

    name: str
    outcome: Outcome
    duration_s: float
    reason: Optional[str] = None
    diagnostic: Mapping[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASSED

    @property
    def group(self) -> str:
        head, sep, _ = self.name.rpartition(".")
        return head if sep else ""


@dataclass(frozen=True)
class GroupSummary:
    name: str
    total: int
    passed: int
    failed_children: Tuple[str, ...] = tuple()

    @property
    def ok(self) -> bool:
        return not self.failed_children


@dataclass(frozen=True)
class SuiteReport:
    """Ordered results of one harness invocation."""

    results: Tuple[TestResult, ...] = tuple()
    duration_s: float = 0.0

    def __iter__(self) -> Iterator[TestResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def outcomes(self) -> Tuple[Outcome, ...]:
        return tuple(result.outcome for result in self.results)

    def count(self, outcome: Outcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return self.count(Outcome.PASSED)

    @property
    def failed(self) -> int:
        return self.count(Outcome.FAILED)

    @property
    def errored(self) -> int:
        return self.count(Outcome.ERRORED)

    @property
    def timed_out(self) -> int:
        return self.count(Outcome.TIMED_OUT)

    @property
    def all_passed(self) -> bool:
        return all(result.passed for result in self.results)

    def summary(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "errored": self.errored,
            "timed_out": self.timed_out,
        }

    def groups(self) -> Tuple[GroupSummary, ...]:
        """Roll results up into every dotted prefix; a group passes only if all children do."""

        order: Dict[str, None] = {}
        members: Dict[str, list] = {}
        for result in self.results:
            parts = result.name.split(".")[:-1]
            for depth in range(1, len(parts) + 1):
                prefix = ".".join(parts[:depth])
                order.setdefault(prefix, None)
                members.setdefault(prefix, []).append(result)
        summaries = []
        for prefix in order:
            children = members[prefix]
            failed = tuple(child.name for child in children if not child.passed)
            summaries.append(
                GroupSummary(
                    name=prefix,
                    total=len(children),
                    passed=len(children) - len(failed),
                    failed_children=failed,
                )
            )
        return tuple(summaries)
