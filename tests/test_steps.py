import pygame
import pytest

from framekit.core import Advance, Call, Click, KeyPress, MouseMove, Quit, RunContext, WaitUntil
from framekit.pipeline import ProbeWidget, build_application


def _context() -> RunContext:
    app = build_application(pygame.Surface((64, 64), depth=32))
    app.root.push(ProbeWidget(7, "probe", size=(32, 32), log_draw=True))
    return RunContext("steps", app)


def test_input_steps_advance_one_frame() -> None:
    context = _context()
    MouseMove((5, 5)).apply(context)
    Click((5, 5)).apply(context)
    KeyPress(pygame.K_b, "b").apply(context)
    assert context.frames_rendered == 3
    assert context.log("probe") == (
        "cursor - 7\ndraw - 7\n"
        "cursor - 7\nfocus - gained - 7\ncursor - 7\ndraw - 7\n"
        "propagating - 7\ndraw - 7\n"
    )


def test_wait_until_and_call() -> None:
    context = _context()
    Call(lambda ctx: ctx.app.logs.append("marks", "called"), "mark").apply(context)
    WaitUntil(lambda ctx: ctx.app.clock.frames >= 4, "four frames").apply(context)
    assert context.frames_rendered == 4
    assert context.log("marks") == "called\n"
    assert WaitUntil(lambda ctx: True).describe() == "WaitUntil(condition)"
    assert Advance(3).describe() == "Advance(3)"


def test_quit_then_observe() -> None:
    context = _context()
    Quit().apply(context)
    observed = context.observe()
    assert observed.state["running"] is False
    assert observed.frame_size == (64, 64)


def test_closed_context_rejects_steps() -> None:
    closed = []
    context = RunContext("closing", build_application(pygame.Surface((8, 8), depth=32)), on_close=lambda: closed.append(1))
    context.close()
    context.close()
    assert closed == [1]
    with pytest.raises(RuntimeError):
        Advance(1).apply(context)
    with pytest.raises(ValueError):
        Advance(-1)
