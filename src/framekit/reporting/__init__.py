"""Reporting exports."""
from .base import EXIT_ERRORS, EXIT_FAILURES, EXIT_FATAL, EXIT_OK, ReportManager, Reporter, exit_code
from .json_reporter import JsonReporter
from .terminal import TerminalReporter

__all__ = [
    "EXIT_ERRORS",
    "EXIT_FAILURES",
    "EXIT_FATAL",
    "EXIT_OK",
    "ReportManager",
    "Reporter",
    "JsonReporter",
    "TerminalReporter",
    "exit_code",
]
