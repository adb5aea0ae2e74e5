"""framekit package initialization."""
from __future__ import annotations

import logging
import os
from typing import Optional

from .version import __version__

__all__ = [
    "__version__",
    "bootstrap",
]

PLUGINS_ENV = "FRAMEKIT_PLUGINS"

logger = logging.getLogger(__name__)


def bootstrap(target=None, *, plugins: Optional[str] = None) -> None:
    """Register built-in scenarios and any plugin scenarios (idempotent per registry)."""

    from .registry import load_builtins, registry

    target = target if target is not None else registry
    load_builtins(target)
    if target.plugins_loaded:
        return
    _load_plugins(target, plugins if plugins is not None else os.environ.get(PLUGINS_ENV, ""))
    target.plugins_loaded = True


def _load_plugins(target, plugin_env: str) -> None:
    from .utils import load_plugin

    for item in plugin_env.split(","):
        spec = item.strip()
        if not spec:
            continue
        register = load_plugin(spec)
        if register is None:
            logger.warning("plugin %s has no register() hook", spec)
            continue
        logger.debug("loading plugin %s", spec)
        register(target)
