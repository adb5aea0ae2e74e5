"""Display bootstrapping exports."""
from .context import (
    DEFAULT_SIZE,
    HEADLESS_DRIVERS,
    DisplayContext,
    candidate_drivers,
    create_display,
    open_display,
)

__all__ = [
    "DEFAULT_SIZE",
    "HEADLESS_DRIVERS",
    "DisplayContext",
    "candidate_drivers",
    "create_display",
    "open_display",
]
