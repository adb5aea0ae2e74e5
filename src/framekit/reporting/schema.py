"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

_OUTCOMES = ["passed", "failed", "errored", "timed_out"]

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "framekit self-test report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "groups", "cases"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "errored", "timed_out", "duration_s", "exit_code"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "errored": {"type": "integer"},
                "timed_out": {"type": "integer"},
                "duration_s": {"type": "number"},
                "exit_code": {"type": "integer"},
            },
        },
        "groups": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "total", "passed", "ok"],
                "properties": {
                    "name": {"type": "string"},
                    "total": {"type": "integer"},
                    "passed": {"type": "integer"},
                    "ok": {"type": "boolean"},
                    "failed": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
        "cases": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "outcome", "duration_ms"],
                "properties": {
                    "name": {"type": "string"},
                    "outcome": {"enum": _OUTCOMES},
                    "duration_ms": {"type": "number"},
                    "reason": {"type": "string"},
                    "diagnostic": {"type": "object"},
                },
            },
        },
    },
}
