"""Display bootstrapping under headless-capable SDL video drivers."""
from __future__ import annotations

import contextlib
import logging
import os
import threading
from typing import Iterator, List, Optional, Sequence, Tuple

import pygame

from framekit.core.errors import ContextBusy, ContextUnavailable

logger = logging.getLogger(__name__)

HEADLESS_DRIVERS: Tuple[str, ...] = ("offscreen", "dummy")
DEFAULT_SIZE: Tuple[int, int] = (320, 240)
WINDOW_TITLE = "framekit"


class DisplayContext:
    """Process-wide display handle, borrowed by one run context at a time."""

    def __init__(self, driver: str, size: Tuple[int, int], *, headless: bool) -> None:
        self.driver = driver
        self.size = (int(size[0]), int(size[1]))
        self.headless = headless
        self._lock = threading.Lock()
        self._holder: Optional[str] = None
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def holder(self) -> Optional[str]:
        return self._holder

    def window(self) -> pygame.Surface:
        """The SDL display surface (a real window unless running headless)."""

        self._ensure_alive()
        surface = pygame.display.get_surface()
        if surface is None:
            raise pygame.error("display surface is not available")
        return surface

    def surface(self, size: Optional[Tuple[int, int]] = None) -> pygame.Surface:
        """Fresh off-screen surface; never shared between run contexts."""

        self._ensure_alive()
        width, height = size or self.size
        surface = pygame.Surface((width, height), depth=32)
        surface.fill((0, 0, 0))
        return surface

    def acquire(self, holder: str) -> None:
        self._ensure_alive()
        if not self._lock.acquire(blocking=False):
            raise ContextBusy(f"Display already held by '{self._holder}', cannot lend it to '{holder}'")
        self._holder = holder

    def release_holder(self, holder: str) -> None:
        if self._holder != holder:
            return
        self._holder = None
        pygame.event.clear()
        self._lock.release()

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        if self._holder is not None:
            logger.warning("releasing display while still held by '%s'", self._holder)
            self._holder = None
            self._lock.release()
        pygame.display.quit()
        logger.debug("display released (driver=%s)", self.driver)

    def _ensure_alive(self) -> None:
        if self._released:
            raise RuntimeError("Display context has already been released")


def candidate_drivers(headless: bool, configured: Sequence[str] = ()) -> List[Optional[str]]:
    """Ordered video drivers to try; ``None`` means SDL's own default."""

    candidates: List[Optional[str]] = []
    env_driver = os.environ.get("SDL_VIDEODRIVER", "").strip()
    if env_driver:
        candidates.append(env_driver)
    if headless:
        candidates.extend(configured or HEADLESS_DRIVERS)
    else:
        candidates.extend(configured)
        candidates.append(None)
    ordered: List[Optional[str]] = []
    for name in candidates:
        if name not in ordered:
            ordered.append(name)
    return ordered


def create_display(
    *,
    headless: bool,
    size: Tuple[int, int] = DEFAULT_SIZE,
    drivers: Sequence[str] = (),
) -> DisplayContext:
    saved_env = os.environ.get("SDL_VIDEODRIVER")
    try:
        return _first_working_driver(headless, size, drivers)
    finally:
        if saved_env is None:
            os.environ.pop("SDL_VIDEODRIVER", None)
        else:
            os.environ["SDL_VIDEODRIVER"] = saved_env


def _first_working_driver(headless: bool, size: Tuple[int, int], drivers: Sequence[str]) -> DisplayContext:
    attempts: List[Tuple[str, str]] = []
    for driver in candidate_drivers(headless, drivers):
        label = driver or "default"
        if driver is None:
            os.environ.pop("SDL_VIDEODRIVER", None)
        else:
            os.environ["SDL_VIDEODRIVER"] = driver
        try:
            pygame.display.init()
            flags = pygame.HIDDEN if headless else 0
            pygame.display.set_mode(size, flags)
            if not headless:
                pygame.display.set_caption(WINDOW_TITLE)
        except pygame.error as exc:
            logger.debug("video driver %s unavailable: %s", label, exc)
            attempts.append((label, str(exc)))
            pygame.display.quit()
            continue
        active = pygame.display.get_driver()
        logger.info("display ready (driver=%s, headless=%s, size=%sx%s)", active, headless, *size)
        return DisplayContext(active, size, headless=headless)
    raise ContextUnavailable(attempts)


@contextlib.contextmanager
def open_display(
    *,
    headless: bool,
    size: Tuple[int, int] = DEFAULT_SIZE,
    drivers: Sequence[str] = (),
) -> Iterator[DisplayContext]:
    """Scoped acquisition: the display is released exactly once on exit."""

    display = create_display(headless=headless, size=size, drivers=drivers)
    try:
        yield display
    finally:
        display.release()
