"""Application frame loop shared by the interactive and headless paths."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import pygame

from .clock import FrameClock
from .input import InputSource, PygameInput
from .ui import Color, CursorEvent, KeyEvent, Panel, Stack, Widget

logger = logging.getLogger(__name__)

BACKGROUND: Color = (24, 24, 32)
TARGET_FPS = 60


class TestLogs:
    """Named, append-only text logs that scenarios can assert on."""

    __test__ = False

    def __init__(self) -> None:
        self._logs: Dict[str, List[str]] = {}

    def append(self, name: str, line: str) -> None:
        self._logs.setdefault(name, []).append(line)

    def get(self, name: str) -> str:
        return "".join(f"{line}\n" for line in self._logs.get(name, ()))

    def pop(self, name: str) -> str:
        text = self.get(name)
        self._logs.pop(name, None)
        return text

    def snapshot(self) -> Dict[str, str]:
        return {name: self.get(name) for name in sorted(self._logs)}

    def clear(self) -> None:
        self._logs.clear()


class Application:
    """One instance of the application: scene tree, simulated clock, target surface.

    ``step`` is the single frame of work for both the interactive loop and the
    scripted harness; only the :class:`InputSource` differs.
    """

    def __init__(
        self,
        surface: pygame.Surface,
        *,
        frame_dt: float = 1.0 / TARGET_FPS,
        background: Color = BACKGROUND,
    ) -> None:
        self.surface = surface
        self.clock = FrameClock(frame_dt)
        self.background = tuple(background)
        self.root = Stack("root")
        self.logs = TestLogs()
        self.running = True
        self.focused: Optional[Widget] = None
        self._updaters: List[Callable[["Application", float], None]] = []
        self._closed = False

    @property
    def size(self) -> Tuple[int, int]:
        return self.surface.get_size()

    def add_updater(self, func: Callable[["Application", float], None]) -> None:
        self._updaters.append(func)

    def set_focus(self, widget: Optional[Widget]) -> None:
        previous = self.focused
        if previous is widget:
            return
        self.focused = widget
        if previous is not None:
            previous.handle_focus_event(self, False)
        if widget is not None:
            widget.handle_focus_event(self, True)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            logger.debug("quit requested")
            self.running = False
        elif event.type == pygame.MOUSEBUTTONDOWN:
            consumer = self.root.dispatch_cursor(self, CursorEvent("press", tuple(event.pos), event.button))
            self.set_focus(consumer)
        elif event.type == pygame.MOUSEBUTTONUP:
            self.root.dispatch_cursor(self, CursorEvent("release", tuple(event.pos), event.button))
        elif event.type == pygame.MOUSEMOTION:
            self.root.dispatch_cursor(self, CursorEvent("move", tuple(event.pos)))
        elif event.type == pygame.KEYDOWN:
            self.root.handle_propagating_event(self, KeyEvent(event.key, getattr(event, "unicode", "")))

    def step(self, source: InputSource) -> None:
        if self._closed:
            raise RuntimeError("Application is closed")
        self.layout()
        for event in source.poll():
            self.handle_event(event)
        dt = self.clock.tick()
        for updater in self._updaters:
            updater(self, dt)
        self.render()

    def layout(self) -> None:
        self.root.layout(self.size)
        self.root.set_position((0, 0))

    def render(self) -> None:
        self.layout()
        self.surface.fill(self.background)
        self.root.draw(self.surface, self)

    def frame_bytes(self) -> bytes:
        return pygame.image.tobytes(self.surface, "RGB")

    def snapshot(self) -> Dict[str, Any]:
        return {
            "frame": self.clock.frames,
            "frame_dt": self.clock.frame_dt,
            "time_s": self.clock.now(),
            "running": self.running,
            "focused": None if self.focused is None else self.focused.name,
            "size": self.size,
            "widgets": {
                widget.name: tuple(widget.bounds)
                for widget in self.root.walk()
                if widget is not self.root
            },
        }

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.running = False
        self.focused = None
        self.root.clear()
        self.logs.clear()
        self._updaters.clear()


def build_application(surface: pygame.Surface, *, frame_dt: float = 1.0 / TARGET_FPS) -> Application:
    """Create the application with its default scene."""

    return Application(surface, frame_dt=frame_dt)


def populate_demo_scene(app: Application) -> None:
    width, height = app.size
    app.root.push(Panel("backdrop", size=(width, height), color=(36, 40, 52)))
    app.root.push(Panel("card", size=(width // 2, height // 2), color=(70, 110, 170)))


def run_interactive(
    surface: pygame.Surface,
    *,
    max_frames: Optional[int] = None,
    frame_dt: float = 1.0 / TARGET_FPS,
    present: bool = True,
) -> int:
    """Interactive loop: real pygame events, paced to ``TARGET_FPS``."""

    app = build_application(surface, frame_dt=frame_dt)
    populate_demo_scene(app)
    source = PygameInput()
    clock = pygame.time.Clock()
    frame = 0
    try:
        while app.running:
            app.step(source)
            if present:
                pygame.display.flip()
            frame += 1
            if max_frames is not None and frame >= max_frames:
                break
            clock.tick(TARGET_FPS)
    finally:
        app.close()
    logger.info("interactive loop finished after %d frame(s)", frame)
    return 0
