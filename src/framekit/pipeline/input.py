"""Input sources feeding the application frame loop."""
from __future__ import annotations

from collections import deque
from typing import Any, Deque, List, Protocol, Tuple

import pygame


class InputSource(Protocol):
    """Anything the frame loop can pull pygame events from."""

    def poll(self) -> List[pygame.event.Event]:
        ...


class PygameInput:
    """Interactive source backed by the SDL event queue."""

    def poll(self) -> List[pygame.event.Event]:
        return pygame.event.get()


class ScriptedInput:
    """Queue of synthesized events, drained one frame at a time."""

    def __init__(self) -> None:
        self._pending: Deque[pygame.event.Event] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def push(self, event_type: int, **attrs: Any) -> None:
        self._pending.append(pygame.event.Event(event_type, attrs))

    def key(self, key: int, *, unicode: str = "") -> None:
        self.push(pygame.KEYDOWN, key=key, mod=0, unicode=unicode)
        self.push(pygame.KEYUP, key=key, mod=0)

    def mouse_move(self, pos: Tuple[int, int]) -> None:
        self.push(pygame.MOUSEMOTION, pos=tuple(pos), rel=(0, 0), buttons=(0, 0, 0))

    def mouse_button(self, pos: Tuple[int, int], *, pressed: bool, button: int = 1) -> None:
        event_type = pygame.MOUSEBUTTONDOWN if pressed else pygame.MOUSEBUTTONUP
        self.push(event_type, pos=tuple(pos), button=button)

    def quit(self) -> None:
        self.push(pygame.QUIT)

    def poll(self) -> List[pygame.event.Event]:
        events = list(self._pending)
        self._pending.clear()
        return events

    def clear(self) -> None:
        self._pending.clear()
