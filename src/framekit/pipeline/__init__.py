"""Application pipeline: frame loop, input sources and widgets."""
from .clock import Clock, FrameClock, RealClock
from .app import BACKGROUND, Application, TestLogs, build_application, populate_demo_scene, run_interactive
from .input import InputSource, PygameInput, ScriptedInput
from .ui import CursorEvent, KeyEvent, Panel, ProbeWidget, Stack, Widget

__all__ = [
    "BACKGROUND",
    "Application",
    "Clock",
    "FrameClock",
    "RealClock",
    "CursorEvent",
    "InputSource",
    "KeyEvent",
    "Panel",
    "ProbeWidget",
    "PygameInput",
    "ScriptedInput",
    "Stack",
    "TestLogs",
    "Widget",
    "build_application",
    "populate_demo_scene",
    "run_interactive",
]
