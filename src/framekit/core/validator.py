"""Expectations evaluated against an observed application state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .context import Observation, frame_digest
from .models import Tolerance

Extractor = Callable[[Observation], Any]


@dataclass
class Check:
    """Outcome of a single expectation."""

    passed: bool
    label: str
    detail: Optional[str] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Verdict:
    """Aggregated validation outcome for a case."""

    passed: bool
    checks: List[Check] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def metrics(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for check in self.checks:
            merged.update(check.metrics)
        return merged


class Expectation:
    """Base class; subclasses must be deterministic functions of the observation."""

    label: str

    def check(self, observed: Observation) -> Check:  # pragma: no cover - interface
        raise NotImplementedError


def state_key(*path: str) -> Extractor:
    """Extractor reading a nested key out of ``Observation.state``."""

    def extract(observed: Observation) -> Any:
        value: Any = observed.state
        for key in path:
            value = value[key]
        return value

    return extract


@dataclass(frozen=True)
class Equals(Expectation):
    """Exact equality on structured state."""

    label: str
    extract: Extractor
    expected: Any

    def check(self, observed: Observation) -> Check:
        actual = self.extract(observed)
        if _exactly_equal(actual, self.expected):
            return Check(passed=True, label=self.label)
        return Check(
            passed=False,
            label=self.label,
            detail=f"{self.label}: expected {self.expected!r}, got {actual!r}",
        )


@dataclass(frozen=True)
class Approx(Expectation):
    """Tolerance-based comparison for scalar or array metrics."""

    label: str
    extract: Extractor
    expected: Any
    tolerance: Tolerance = field(default_factory=Tolerance)

    def check(self, observed: Observation) -> Check:
        actual = np.asarray(self.extract(observed), dtype=np.float64)
        expected = np.asarray(self.expected, dtype=np.float64)
        if actual.shape != expected.shape:
            return Check(
                passed=False,
                label=self.label,
                detail=f"{self.label}: shape mismatch: actual {actual.shape}, expected {expected.shape}",
            )
        max_abs, max_rel = _diff_metrics(actual, expected)
        metrics = {f"{self.label}.max_abs": max_abs, f"{self.label}.max_rel": max_rel}
        close = np.isclose(actual, expected, atol=self.tolerance.absolute, rtol=self.tolerance.relative)
        mismatched = int(close.size - int(np.count_nonzero(close)))
        if mismatched == 0:
            return Check(passed=True, label=self.label, metrics=metrics)
        if actual.ndim == 0:
            detail = (
                f"{self.label}: {float(actual)} not within "
                f"(abs={self.tolerance.absolute}, rel={self.tolerance.relative}) of {float(expected)}"
            )
        else:
            detail = f"{self.label}: mismatched {mismatched}/{close.size} max_abs={max_abs:.3e} max_rel={max_rel:.3e}"
        return Check(passed=False, label=self.label, detail=detail, metrics=metrics)


ExpectedDigest = Union[str, Callable[[Tuple[int, int]], str]]


@dataclass(frozen=True)
class FrameHash(Expectation):
    """Content hash of the rendered frame; ``expected`` may depend on frame size."""

    expected: ExpectedDigest
    label: str = "frame"

    def check(self, observed: Observation) -> Check:
        expected = self.expected(observed.frame_size) if callable(self.expected) else self.expected
        actual = observed.frame_checksum
        metrics = {f"{self.label}.sha256": actual}
        if actual == expected:
            return Check(passed=True, label=self.label, metrics=metrics)
        return Check(
            passed=False,
            label=self.label,
            detail=f"{self.label}: checksum {actual[:16]} != expected {expected[:16]}",
            metrics=metrics,
        )


@dataclass(frozen=True)
class LogEquals(Expectation):
    """Exact comparison of a named test log."""

    name: str
    expected: str

    @property
    def label(self) -> str:  # type: ignore[override]
        return f"log[{self.name}]"

    def check(self, observed: Observation) -> Check:
        actual = observed.log(self.name)
        if actual == self.expected:
            return Check(passed=True, label=self.label)
        return Check(
            passed=False,
            label=self.label,
            detail=f"{self.label}: expected {self.expected!r}, got {actual!r}",
        )


@dataclass(frozen=True)
class Predicate(Expectation):
    """Arbitrary boolean predicate over the observation."""

    label: str
    fn: Callable[[Observation], bool]

    def check(self, observed: Observation) -> Check:
        if self.fn(observed):
            return Check(passed=True, label=self.label)
        return Check(passed=False, label=self.label, detail=f"predicate '{self.label}' does not hold")


def validate(observed: Observation, expectations: Sequence[Expectation]) -> Verdict:
    """Evaluate every expectation; the first failure supplies the reason."""

    checks = [expectation.check(observed) for expectation in expectations]
    failed = next((check for check in checks if not check.passed), None)
    if failed is None:
        return Verdict(passed=True, checks=checks)
    return Verdict(passed=False, checks=checks, reason=failed.detail or failed.label)


def solid_frame_digest(color: Tuple[int, int, int]) -> Callable[[Tuple[int, int]], str]:
    """Expected digest of a frame filled with one colour, built without pygame."""

    def digest(size: Tuple[int, int]) -> str:
        width, height = size
        pixels = np.empty((height, width, 3), dtype=np.uint8)
        pixels[...] = np.asarray(color, dtype=np.uint8)
        return frame_digest(size, pixels.tobytes())

    return digest


def _exactly_equal(actual: Any, expected: Any) -> bool:
    if isinstance(actual, (np.ndarray, np.generic)) or isinstance(expected, (np.ndarray, np.generic)):
        return bool(np.array_equal(np.asarray(actual), np.asarray(expected)))
    return bool(actual == expected)


def _diff_metrics(actual: np.ndarray, expected: np.ndarray) -> Tuple[float, float]:
    diff = np.abs(actual - expected)
    if diff.size == 0:
        return 0.0, 0.0
    denom = np.maximum(np.abs(expected), 1e-12)
    return float(diff.max()), float(np.divide(diff, denom).max(initial=0.0))
