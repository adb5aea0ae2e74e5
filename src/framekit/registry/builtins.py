"""Built-in scenarios exercising the application's own pipeline."""
from __future__ import annotations

from typing import Tuple

import numpy as np
import pygame

from framekit.core import (
    Advance,
    Approx,
    Equals,
    FrameHash,
    KeyPress,
    LogEquals,
    MouseButton,
    Observation,
    Predicate,
    Quit,
    RunContext,
    TestCase,
    Tolerance,
    make_case,
    solid_frame_digest,
    state_key,
)
from framekit.pipeline import BACKGROUND, Panel, ProbeWidget, populate_demo_scene

STACK_LOG = "ui.stack"
LOWER_SIZE = (200, 200)
UPPER_SIZE = (100, 100)
SWATCH_COLOR = (255, 0, 0)
SWATCH_SIZE = (16, 16)
SLIDER_SPEED = 60.0  # px per simulated second


def _stack(*, passthrough: bool = False, consume: bool = False):
    def setup(context: RunContext) -> None:
        root = context.app.root
        root.push(ProbeWidget(1, STACK_LOG, size=LOWER_SIZE, color=(60, 90, 140)))
        root.push(
            ProbeWidget(
                2,
                STACK_LOG,
                size=UPPER_SIZE,
                color=(200, 120, 60),
                mouse_passthrough=passthrough,
                consume_propagate=consume,
            )
        )

    return setup


def _stack_cases() -> Tuple[TestCase, ...]:
    inside_upper = (50, 50)
    lower_only = (150, 150)
    outside = (LOWER_SIZE[0] + 10, LOWER_SIZE[1] + 10)
    focused = state_key("focused")
    return (
        make_case(
            "ui.stack.cursor_hits_topmost",
            setup=_stack(),
            steps=[MouseButton(inside_upper)],
            expect=[LogEquals(STACK_LOG, "cursor - 2\nfocus - gained - 2\n")],
            description="The topmost widget under the cursor consumes the press.",
        ),
        make_case(
            "ui.stack.cursor_passthrough",
            setup=_stack(passthrough=True),
            steps=[MouseButton(inside_upper)],
            expect=[
                LogEquals(STACK_LOG, "cursor - 2\ncursor - 1\nfocus - gained - 1\n"),
                Equals("focused", focused, "probe-1"),
            ],
            description="A passthrough widget hands the press to the widget beneath.",
        ),
        make_case(
            "ui.stack.cursor_misses_upper",
            setup=_stack(),
            steps=[MouseButton(lower_only)],
            expect=[LogEquals(STACK_LOG, "cursor - 1\nfocus - gained - 1\n")],
        ),
        make_case(
            "ui.stack.focus_moves",
            setup=_stack(),
            steps=[MouseButton(inside_upper), MouseButton(lower_only)],
            expect=[
                LogEquals(
                    STACK_LOG,
                    "cursor - 2\nfocus - gained - 2\ncursor - 1\nfocus - lost - 2\nfocus - gained - 1\n",
                ),
                Equals("focused", focused, "probe-1"),
            ],
        ),
        make_case(
            "ui.stack.focus_cleared_outside",
            setup=_stack(),
            steps=[MouseButton(inside_upper), MouseButton(outside)],
            expect=[
                LogEquals(STACK_LOG, "cursor - 2\nfocus - gained - 2\nfocus - lost - 2\n"),
                Equals("focused", focused, None),
            ],
        ),
        make_case(
            "ui.stack.key_propagates",
            setup=_stack(),
            steps=[KeyPress(pygame.K_a, "a")],
            expect=[LogEquals(STACK_LOG, "propagating - 2\npropagating - 1\n")],
        ),
        make_case(
            "ui.stack.key_consumed",
            setup=_stack(consume=True),
            steps=[KeyPress(pygame.K_a, "a")],
            expect=[LogEquals(STACK_LOG, "propagating - 2\n")],
        ),
    )


def _utility_cases() -> Tuple[TestCase, ...]:
    return (
        make_case(
            "utility.close",
            steps=[Quit()],
            expect=[Equals("running", state_key("running"), False)],
            description="A quit event stops the frame loop.",
        ),
        make_case(
            "utility.keeps_running",
            steps=[Advance(5)],
            expect=[
                Equals("running", state_key("running"), True),
                Predicate("at least 5 frames", lambda o: o.state["frame"] >= 5),
            ],
        ),
    )


def _swatch(context: RunContext) -> None:
    context.app.root.push(Panel("swatch", size=SWATCH_SIZE, color=SWATCH_COLOR))


def _region_mean(observed: Observation, rect: Tuple[int, int, int, int]) -> np.ndarray:
    x, y, w, h = rect
    return observed.frame_array()[y : y + h, x : x + w].reshape(-1, 3).mean(axis=0)


def _demo_scene(context: RunContext) -> None:
    populate_demo_scene(context.app)


def _slider(context: RunContext) -> None:
    panel = context.app.root.push(Panel("slider", size=(8, 8), color=(240, 240, 240)))

    def move(app, dt: float) -> None:
        panel.offset = (int(round(app.clock.now() * SLIDER_SPEED)), 0)

    context.app.add_updater(move)


def _render_cases() -> Tuple[TestCase, ...]:
    swatch_rect = (0, 0) + SWATCH_SIZE
    return (
        make_case(
            "render.clear_color",
            steps=[Advance(1)],
            expect=[FrameHash(solid_frame_digest(BACKGROUND), label="clear")],
            description="An empty scene renders as the background colour.",
        ),
        make_case(
            "render.panel_fill",
            setup=_swatch,
            steps=[Advance(1)],
            expect=[
                Equals(
                    "swatch pixel",
                    lambda o: tuple(int(c) for c in o.frame_array()[SWATCH_SIZE[1] // 2, SWATCH_SIZE[0] // 2]),
                    SWATCH_COLOR,
                ),
                Approx("swatch mean", lambda o: _region_mean(o, swatch_rect), SWATCH_COLOR),
                Approx(
                    "outside mean",
                    lambda o: _region_mean(o, (SWATCH_SIZE[0], 0, SWATCH_SIZE[0], SWATCH_SIZE[1])),
                    BACKGROUND,
                ),
            ],
        ),
        make_case(
            "render.demo_scene",
            setup=_demo_scene,
            steps=[Advance(1)],
            expect=[
                Predicate(
                    "card covers top-left quarter",
                    lambda o: o.state["widgets"]["card"] == (0, 0, o.frame_size[0] // 2, o.frame_size[1] // 2),
                ),
                Predicate(
                    "frame differs from clear colour",
                    lambda o: o.frame_checksum != solid_frame_digest(BACKGROUND)(o.frame_size),
                ),
            ],
        ),
        make_case(
            "render.slider_follows_clock",
            setup=_slider,
            steps=[Advance(30)],
            expect=[
                Predicate("slider moved", lambda o: o.state["widgets"]["slider"][0] > 0),
                Approx(
                    "slider x drift",
                    lambda o: o.state["widgets"]["slider"][0] - round(o.state["time_s"] * SLIDER_SPEED),
                    0.0,
                    Tolerance(absolute=0.5, relative=0.0),
                ),
            ],
        ),
    )


def _timing_cases() -> Tuple[TestCase, ...]:
    return (
        make_case(
            "timing.frame_clock",
            steps=[Advance(30)],
            expect=[
                Predicate("at least 30 frames", lambda o: o.state["frame"] >= 30),
                Approx(
                    "clock drift",
                    lambda o: o.state["time_s"] - o.state["frame"] * o.state["frame_dt"],
                    0.0,
                    Tolerance(absolute=1e-9, relative=0.0),
                ),
            ],
        ),
    )


def builtin_cases() -> Tuple[TestCase, ...]:
    return _stack_cases() + _utility_cases() + _render_cases() + _timing_cases()
