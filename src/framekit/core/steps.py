"""Scripted input and time-step events applied to a run context."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .context import RunContext


class Step:
    """One scripted action. Input steps enqueue events and advance one frame."""

    def apply(self, context: "RunContext") -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Advance(Step):
    frames: int = 1

    def __post_init__(self) -> None:
        if self.frames < 0:
            raise ValueError("frames must be >= 0")

    def apply(self, context: "RunContext") -> None:
        context.advance(self.frames)

    def describe(self) -> str:
        return f"Advance({self.frames})"


@dataclass(frozen=True)
class KeyPress(Step):
    key: int
    unicode: str = ""

    def apply(self, context: "RunContext") -> None:
        context.input.key(self.key, unicode=self.unicode)
        context.advance(1)


@dataclass(frozen=True)
class MouseMove(Step):
    pos: Tuple[int, int]

    def apply(self, context: "RunContext") -> None:
        context.input.mouse_move(self.pos)
        context.advance(1)


@dataclass(frozen=True)
class MouseButton(Step):
    pos: Tuple[int, int]
    pressed: bool = True
    button: int = 1

    def apply(self, context: "RunContext") -> None:
        context.input.mouse_button(self.pos, pressed=self.pressed, button=self.button)
        context.advance(1)


@dataclass(frozen=True)
class Click(Step):
    """Press and release at ``pos`` within one frame."""

    pos: Tuple[int, int]
    button: int = 1

    def apply(self, context: "RunContext") -> None:
        context.input.mouse_button(self.pos, pressed=True, button=self.button)
        context.input.mouse_button(self.pos, pressed=False, button=self.button)
        context.advance(1)


@dataclass(frozen=True)
class Quit(Step):
    def apply(self, context: "RunContext") -> None:
        context.input.quit()
        context.advance(1)


@dataclass(frozen=True)
class WaitUntil(Step):
    """Advance frames until ``condition`` holds.

    Without ``max_frames`` this only ends through the condition or the case timeout.
    """

    condition: Callable[["RunContext"], bool]
    description: str = "condition"
    max_frames: Optional[int] = None

    def apply(self, context: "RunContext") -> None:
        waited = 0
        while not self.condition(context):
            if self.max_frames is not None and waited >= self.max_frames:
                raise AssertionError(f"'{self.description}' not reached within {self.max_frames} frame(s)")
            context.advance(1)
            waited += 1

    def describe(self) -> str:
        return f"WaitUntil({self.description})"


@dataclass(frozen=True)
class Call(Step):
    """Run an arbitrary action against the context."""

    action: Callable[["RunContext"], None]
    description: str = "call"

    def apply(self, context: "RunContext") -> None:
        context.checkpoint()
        self.action(context)

    def describe(self) -> str:
        return f"Call({self.description})"
