"""Retained widget tree used by the application's scenes.

Cursor events are delivered topmost-first to widgets under the pointer; a
widget returns the event to let it fall through to the widgets beneath, or
``None`` to consume it. Propagating events (keys) visit every widget in the
same order until one consumes them.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

import pygame

if TYPE_CHECKING:  # pragma: no cover
    from .app import Application

Color = Tuple[int, int, int]

_widget_ids = itertools.count(1)


@dataclass(frozen=True)
class CursorEvent:
    kind: str  # "press" | "release" | "move"
    pos: Tuple[int, int]
    button: int = 0


@dataclass(frozen=True)
class KeyEvent:
    key: int
    unicode: str = ""


class Widget:
    """Base widget: fixed preferred size, no drawing, passes every event on."""

    def __init__(self, name: Optional[str] = None, *, size: Tuple[int, int] = (0, 0)) -> None:
        self.widget_id = next(_widget_ids)
        self.name = name or f"{type(self).__name__.lower()}-{self.widget_id}"
        self.pref_size = (int(size[0]), int(size[1]))
        self.offset = (0, 0)
        self.bounds = pygame.Rect(0, 0, 0, 0)

    def layout(self, max_size: Tuple[int, int]) -> Tuple[int, int]:
        width = max(0, min(self.pref_size[0], max_size[0]))
        height = max(0, min(self.pref_size[1], max_size[1]))
        self.bounds.size = (width, height)
        return width, height

    def set_position(self, pos: Tuple[int, int]) -> None:
        self.bounds.topleft = (pos[0] + self.offset[0], pos[1] + self.offset[1])

    def walk(self) -> Iterator["Widget"]:
        yield self

    def draw(self, surface: pygame.Surface, app: "Application") -> None:
        return None

    def handle_cursor_event(self, app: "Application", event: CursorEvent) -> Optional[CursorEvent]:
        return event

    def handle_focus_event(self, app: "Application", focused: bool) -> None:
        return None

    def handle_propagating_event(self, app: "Application", event: KeyEvent) -> Optional[KeyEvent]:
        return event


class Panel(Widget):
    """Solid rectangle."""

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        size: Tuple[int, int] = (0, 0),
        color: Color = (200, 200, 200),
    ) -> None:
        super().__init__(name, size=size)
        self.color = tuple(color)

    def draw(self, surface: pygame.Surface, app: "Application") -> None:
        if self.bounds.width and self.bounds.height:
            surface.fill(self.color, self.bounds)


class Stack(Widget):
    """Overlapping children sharing the stack's origin; later children sit on top."""

    def __init__(self, name: Optional[str] = None, children: Optional[List[Widget]] = None) -> None:
        super().__init__(name)
        self.children: List[Widget] = list(children or [])

    def push(self, widget: Widget) -> Widget:
        self.children.append(widget)
        return widget

    def clear(self) -> None:
        self.children.clear()

    def walk(self) -> Iterator[Widget]:
        yield self
        for child in self.children:
            yield from child.walk()

    def layout(self, max_size: Tuple[int, int]) -> Tuple[int, int]:
        width = height = 0
        for child in self.children:
            child_w, child_h = child.layout(max_size)
            width = max(width, child_w)
            height = max(height, child_h)
        self.bounds.size = (width, height)
        return width, height

    def set_position(self, pos: Tuple[int, int]) -> None:
        super().set_position(pos)
        for child in self.children:
            child.set_position(self.bounds.topleft)

    def draw(self, surface: pygame.Surface, app: "Application") -> None:
        for child in self.children:
            child.draw(surface, app)

    def dispatch_cursor(self, app: "Application", event: CursorEvent) -> Optional[Widget]:
        """Deliver ``event`` topmost-first; return the widget that consumed it."""

        for child in reversed(self.children):
            if isinstance(child, Stack):
                consumer = child.dispatch_cursor(app, event)
                if consumer is not None:
                    return consumer
                continue
            if not child.bounds.collidepoint(event.pos):
                continue
            if child.handle_cursor_event(app, event) is None:
                return child
        return None

    def handle_propagating_event(self, app: "Application", event: KeyEvent) -> Optional[KeyEvent]:
        for child in reversed(self.children):
            if child.handle_propagating_event(app, event) is None:
                return None
        return event


class ProbeWidget(Panel):
    """Panel that records every event it sees into a named test log."""

    def __init__(
        self,
        probe_id: int,
        log_name: str,
        *,
        size: Tuple[int, int],
        color: Color = (90, 140, 220),
        mouse_passthrough: bool = False,
        consume_propagate: bool = False,
        log_draw: bool = False,
    ) -> None:
        super().__init__(f"probe-{probe_id}", size=size, color=color)
        self.probe_id = probe_id
        self.log_name = log_name
        self.mouse_passthrough = mouse_passthrough
        self.consume_propagate = consume_propagate
        self.log_draw = log_draw

    def _record(self, app: "Application", text: str) -> None:
        app.logs.append(self.log_name, f"{text}{self.probe_id}")

    def draw(self, surface: pygame.Surface, app: "Application") -> None:
        super().draw(surface, app)
        if self.log_draw:
            self._record(app, "draw - ")

    def handle_cursor_event(self, app: "Application", event: CursorEvent) -> Optional[CursorEvent]:
        self._record(app, "cursor - ")
        return event if self.mouse_passthrough else None

    def handle_focus_event(self, app: "Application", focused: bool) -> None:
        self._record(app, "focus - gained - " if focused else "focus - lost - ")

    def handle_propagating_event(self, app: "Application", event: KeyEvent) -> Optional[KeyEvent]:
        self._record(app, "propagating - ")
        return None if self.consume_propagate else event
