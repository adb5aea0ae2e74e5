"""Per-case run contexts and the provider that builds them."""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Protocol, Tuple

import numpy as np

from framekit.pipeline import Application, ScriptedInput, build_application

from .models import TestCase

if TYPE_CHECKING:  # pragma: no cover
    from framekit.display import DisplayContext

logger = logging.getLogger(__name__)


def frame_digest(size: Tuple[int, int], rgb: bytes) -> str:
    """SHA-256 over the frame size and its packed RGB bytes."""

    digest = hashlib.sha256()
    digest.update(f"{size[0]}x{size[1]}:".encode("ascii"))
    digest.update(rgb)
    return digest.hexdigest()


@dataclass(frozen=True)
class Observation:
    """Immutable snapshot of application state taken after a case's steps."""

    state: Mapping[str, Any]
    logs: Mapping[str, str] = field(default_factory=dict)
    frame_size: Tuple[int, int] = (0, 0)
    frame_rgb: bytes = b""

    @property
    def frame_checksum(self) -> str:
        return frame_digest(self.frame_size, self.frame_rgb)

    def frame_array(self) -> np.ndarray:
        width, height = self.frame_size
        return np.frombuffer(self.frame_rgb, dtype=np.uint8).reshape(height, width, 3)

    def log(self, name: str) -> str:
        return self.logs.get(name, "")


class RunContext:
    """Live application state for exactly one case."""

    def __init__(
        self,
        name: str,
        app: Application,
        *,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self.name = name
        self.app = app
        self.input = ScriptedInput()
        self.watchdog: Callable[[], None] = lambda: None
        self.frames_rendered = 0
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def checkpoint(self) -> None:
        if self._closed:
            raise RuntimeError(f"Run context for '{self.name}' is closed")
        self.watchdog()

    def advance(self, frames: int = 1) -> None:
        for _ in range(frames):
            self.checkpoint()
            self.app.step(self.input)
            self.frames_rendered += 1

    def log(self, name: str) -> str:
        return self.app.logs.get(name)

    def observe(self) -> Observation:
        self.checkpoint()
        return Observation(
            state=self.app.snapshot(),
            logs=self.app.logs.snapshot(),
            frame_size=self.app.size,
            frame_rgb=self.app.frame_bytes(),
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.input.clear()
            self.app.close()
        finally:
            if self._on_close is not None:
                self._on_close()


class RunContextProvider(Protocol):
    def open(self, case: TestCase) -> RunContext:
        ...


AppFactory = Callable[..., Application]


class DisplayContextProvider:
    """Builds a fresh application on a fresh off-screen surface for every case."""

    def __init__(
        self,
        display: "DisplayContext",
        *,
        app_factory: AppFactory = build_application,
        frame_dt: float = 1.0 / 60.0,
    ) -> None:
        self._display = display
        self._app_factory = app_factory
        self._frame_dt = frame_dt

    def open(self, case: TestCase) -> RunContext:
        self._display.acquire(case.name)
        try:
            surface = self._display.surface()
            app = self._app_factory(surface, frame_dt=self._frame_dt)
        except Exception:
            self._display.release_holder(case.name)
            raise
        logger.debug("opened run context for %s", case.name)
        return RunContext(case.name, app, on_close=lambda: self._display.release_holder(case.name))
