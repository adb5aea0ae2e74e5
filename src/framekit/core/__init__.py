"""Core models and helpers exposed at the package level."""
from .context import DisplayContextProvider, Observation, RunContext, RunContextProvider, frame_digest
from .errors import CaseTimeout, ConfigError, ContextBusy, ContextUnavailable, DuplicateTestName, FramekitError
from .models import TestCase, Tolerance, make_case
from .results import GroupSummary, Outcome, SuiteReport, TestResult
from .runner import TestRunner, Watchdog
from .steps import Advance, Call, Click, KeyPress, MouseButton, MouseMove, Quit, Step, WaitUntil
from .validator import (
    Approx,
    Check,
    Equals,
    Expectation,
    FrameHash,
    LogEquals,
    Predicate,
    Verdict,
    solid_frame_digest,
    state_key,
    validate,
)

__all__ = [
    "Advance",
    "Approx",
    "Call",
    "CaseTimeout",
    "Check",
    "Click",
    "ConfigError",
    "ContextBusy",
    "ContextUnavailable",
    "DisplayContextProvider",
    "DuplicateTestName",
    "Equals",
    "Expectation",
    "FrameHash",
    "FramekitError",
    "GroupSummary",
    "KeyPress",
    "LogEquals",
    "MouseButton",
    "MouseMove",
    "Observation",
    "Outcome",
    "Predicate",
    "Quit",
    "RunContext",
    "RunContextProvider",
    "Step",
    "SuiteReport",
    "TestCase",
    "TestResult",
    "TestRunner",
    "Tolerance",
    "Verdict",
    "WaitUntil",
    "Watchdog",
    "frame_digest",
    "make_case",
    "solid_frame_digest",
    "state_key",
    "validate",
]
