"""Core dataclasses shared across framekit subsystems."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .context import RunContext
    from .steps import Step
    from .validator import Expectation


SetupFn = Callable[["RunContext"], None]


@dataclass(frozen=True)
class Tolerance:
    """Numerical tolerance definition for comparisons."""

    absolute: float = 1e-6
    relative: float = 1e-6


def _no_setup(_: "RunContext") -> None:
    return None


@dataclass(frozen=True)
class TestCase:
    """A named, scripted exercise of the application pipeline."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    steps: Tuple["Step", ...] = tuple()
    expect: Tuple["Expectation", ...] = tuple()
    setup: SetupFn = _no_setup
    timeout_s: Optional[float] = None
    description: str = ""
    tags: Tuple[str, ...] = tuple()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Test case name cannot be empty")
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be > 0 for case '{self.name}'")
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "expect", tuple(self.expect))
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def group(self) -> str:
        head, sep, _ = self.name.rpartition(".")
        return head if sep else ""

    def renamed(self, name: str) -> "TestCase":
        return replace(self, name=name)


def make_case(
    name: str,
    *,
    steps: Sequence["Step"] = (),
    expect: Sequence["Expectation"] = (),
    setup: Optional[SetupFn] = None,
    timeout_s: Optional[float] = None,
    description: str = "",
    tags: Sequence[str] = (),
) -> TestCase:
    return TestCase(
        name=name,
        steps=tuple(steps),
        expect=tuple(expect),
        setup=setup or _no_setup,
        timeout_s=timeout_s,
        description=description,
        tags=tuple(tags),
    )

