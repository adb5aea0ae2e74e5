"""Utility helpers for dynamic imports."""
from __future__ import annotations

import importlib
from typing import Any, Callable


def import_string(path: str) -> Any:
    """Return the attribute at the given dotted path.

    Supports ``module:attr`` or ``module.attr`` syntax.
    """

    if not path:
        raise ValueError("Empty import path provided")
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, sep, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Invalid import path '{path}'")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise AttributeError(f"Module '{module_name}' has no attribute '{attr}'") from exc


def load_plugin(spec: str) -> Callable[..., Any] | None:
    """Resolve a plugin entry to its registration hook.

    ``package.module`` yields the module's ``register`` function (or ``None``);
    ``package.module:func`` yields ``func``.
    """

    if ":" in spec:
        return import_string(spec)
    module = importlib.import_module(spec)
    register = getattr(module, "register", None)
    return register if callable(register) else None
