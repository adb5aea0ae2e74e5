import os

os.environ["SDL_VIDEODRIVER"] = "dummy"
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from typing import Iterator, Tuple

import pygame
import pytest

from framekit.core import RunContext, TestCase
from framekit.display import DisplayContext, open_display
from framekit.pipeline import build_application
from framekit.registry import TestRegistry


class SurfaceProvider:
    """Run contexts on plain off-screen surfaces; no video driver needed."""

    def __init__(self, size: Tuple[int, int] = (320, 240)) -> None:
        self.size = size
        self.opened: list[str] = []
        self.closed: list[str] = []

    def open(self, case: TestCase) -> RunContext:
        self.opened.append(case.name)
        app = build_application(pygame.Surface(self.size, depth=32))
        return RunContext(case.name, app, on_close=lambda: self.closed.append(case.name))


@pytest.fixture()
def surface_provider() -> SurfaceProvider:
    return SurfaceProvider()


@pytest.fixture()
def display() -> Iterator[DisplayContext]:
    """Fresh headless display for each test; released on teardown."""

    with open_display(headless=True) as ctx:
        yield ctx


@pytest.fixture()
def fresh_registry() -> TestRegistry:
    return TestRegistry()
