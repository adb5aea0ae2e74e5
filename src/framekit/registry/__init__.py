"""Test registry public API."""
from .registry import (
    TestGroup,
    TestRegistry,
    clear_registry,
    load_builtins,
    register_case,
    registry,
)

__all__ = [
    "TestGroup",
    "TestRegistry",
    "registry",
    "register_case",
    "load_builtins",
    "clear_registry",
]
