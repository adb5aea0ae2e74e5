"""Exception hierarchy for the self-test harness."""
from __future__ import annotations

from typing import Sequence, Tuple


class FramekitError(Exception):
    """Base class for fatal harness errors."""


class ContextUnavailable(FramekitError):
    """No video driver could provide a rendering context."""

    def __init__(self, attempts: Sequence[Tuple[str, str]]) -> None:
        self.attempts = tuple(attempts)
        if self.attempts:
            tried = "; ".join(f"{driver}: {reason}" for driver, reason in self.attempts)
        else:
            tried = "no drivers configured"
        super().__init__(f"Unable to create a rendering context ({tried})")


class DuplicateTestName(FramekitError):
    """A scenario with the same name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Test case '{name}' already registered")


class ConfigError(FramekitError):
    """Settings file is missing, malformed or fails schema validation."""


class ContextBusy(FramekitError):
    """The display is already held by another run context."""


class CaseTimeout(Exception):
    """Raised inside a running case once its time budget is spent."""
