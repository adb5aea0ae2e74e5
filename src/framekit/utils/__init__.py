"""Utility helpers."""
from .importing import import_string, load_plugin

__all__ = ["import_string", "load_plugin"]
