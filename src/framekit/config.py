"""YAML settings file loading and validation."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from jsonschema import Draft7Validator

from framekit.core.errors import ConfigError
from framekit.core.runner import DEFAULT_CASE_TIMEOUT_S, DEFAULT_SUITE_TIMEOUT_S
from framekit.display import DEFAULT_SIZE

CONFIG_ENV = "FRAMEKIT_CONFIG"
REPORT_FORMATS = ("terminal", "json")
DEFAULT_JSON_REPORT = "framekit-report.json"

_positive = {"type": "number", "exclusiveMinimum": 0}

CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "harness": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "headless": {"type": "boolean"},
                "drivers": {"type": "array", "items": {"type": "string", "minLength": 1}},
                "size": {
                    "type": "array",
                    "items": {"type": "integer", "minimum": 1},
                    "minItems": 2,
                    "maxItems": 2,
                },
                "case_timeout_s": {"oneOf": [_positive, {"type": "null"}]},
                "suite_timeout_s": {"oneOf": [_positive, {"type": "null"}]},
                "settle_frames": {"type": "integer", "minimum": 0},
                "frame_dt": _positive,
                "fail_fast": {"type": "boolean"},
                "cases": {"type": "array", "items": {"type": "string", "minLength": 1}},
            },
        },
        "report": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "format": {"enum": list(REPORT_FORMATS)},
                "path": {"type": "string", "minLength": 1},
                "color": {"type": "boolean"},
                "show_timing": {"type": "boolean"},
            },
        },
    },
}

_validator = Draft7Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class HarnessSettings:
    """How the harness bootstraps the display and schedules cases."""

    headless: bool = False
    drivers: Tuple[str, ...] = tuple()
    size: Tuple[int, int] = DEFAULT_SIZE
    case_timeout_s: Optional[float] = DEFAULT_CASE_TIMEOUT_S
    suite_timeout_s: Optional[float] = DEFAULT_SUITE_TIMEOUT_S
    settle_frames: int = 1
    frame_dt: float = 1.0 / 60.0
    fail_fast: bool = False
    cases: Tuple[str, ...] = tuple()


@dataclass(frozen=True)
class ReportSettings:
    format: str = "terminal"
    path: Optional[str] = None
    color: bool = True
    show_timing: bool = True

    @property
    def json_path(self) -> str:
        return self.path or DEFAULT_JSON_REPORT


@dataclass(frozen=True)
class Settings:
    harness: HarnessSettings = HarnessSettings()
    report: ReportSettings = ReportSettings()

    def with_overrides(self, harness: Mapping[str, Any], report: Mapping[str, Any]) -> "Settings":
        """Apply non-``None`` overrides (typically CLI options) on top of the file values."""

        harness_changes = {key: value for key, value in harness.items() if value is not None}
        report_changes = {key: value for key, value in report.items() if value is not None}
        return Settings(
            harness=replace(self.harness, **harness_changes),
            report=replace(self.report, **report_changes),
        )


def resolve_config_path(path: Optional[str]) -> Optional[str]:
    """Explicit path wins; otherwise fall back to ``FRAMEKIT_CONFIG``."""

    if path:
        return path
    env_path = os.environ.get(CONFIG_ENV, "").strip()
    return env_path or None


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from ``path``; defaults apply when no file is given."""

    if path is None:
        return Settings()
    config_path = Path(path).expanduser()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    return parse_settings(raw, source=str(config_path))


def parse_settings(raw: Any, *, source: str = "<config>") -> Settings:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{source}: config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: [str(part) for part in e.path])
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigError(f"{source}: schema validation failed: {messages}")
    harness = dict(raw.get("harness") or {})
    report = dict(raw.get("report") or {})
    return Settings(
        harness=HarnessSettings(**_normalize_harness(harness)),
        report=ReportSettings(**report),
    )


def _normalize_harness(data: Dict[str, Any]) -> Dict[str, Any]:
    if "drivers" in data:
        data["drivers"] = tuple(data["drivers"])
    if "cases" in data:
        data["cases"] = tuple(data["cases"])
    if "size" in data:
        data["size"] = (int(data["size"][0]), int(data["size"][1]))
    for key in ("case_timeout_s", "suite_timeout_s", "frame_dt"):
        if data.get(key) is not None:
            data[key] = float(data[key])
    return data
