"""Time sources: wall clock for budgets, simulated frame clock for the pipeline."""
from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Seconds on a monotonic scale; only differences are meaningful."""


class RealClock:
    """Wall clock used for case and suite budgets."""

    def now(self) -> float:
        return time.monotonic()


class FrameClock:
    """Simulated clock that only moves when a frame is advanced."""

    def __init__(self, frame_dt: float = 1.0 / 60.0) -> None:
        if frame_dt <= 0:
            raise ValueError("frame_dt must be > 0")
        self._frame_dt = float(frame_dt)
        self._frames = 0

    @property
    def frame_dt(self) -> float:
        return self._frame_dt

    @property
    def frames(self) -> int:
        return self._frames

    def now(self) -> float:
        return self._frames * self._frame_dt

    def tick(self) -> float:
        self._frames += 1
        return self._frame_dt
