"""JSON reporter emitting structured self-test results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
from typing import Any, Dict, Sequence

import click
import numpy as np
from jsonschema import validate

from framekit.core.models import TestCase
from framekit.core.results import SuiteReport, TestResult

from .base import Reporter, exit_code
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Writes results to a JSON file validated against the schema."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)
        self._records: list[Dict[str, Any]] = []
        self._started = False

    @property
    def path(self) -> pathlib.Path:
        return self._path

    def on_start(self, cases: Sequence[TestCase]) -> None:
        self._records.clear()
        self._started = True

    def on_case_result(self, result: TestResult, index: int, total: int) -> None:
        self._records.append(_result_to_dict(result))

    def on_complete(self, report: SuiteReport) -> None:
        if not self._started:
            return
        payload = build_payload(report, records=self._records)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}")


def build_payload(report: SuiteReport, *, records: Sequence[Dict[str, Any]] = ()) -> Dict[str, Any]:
    """Schema-validated report document; ``records`` default to the report's own results."""

    summary: Dict[str, Any] = dict(report.summary())
    summary["duration_s"] = report.duration_s
    summary["exit_code"] = exit_code(report)
    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at": dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "summary": summary,
        "groups": [
            {
                "name": group.name,
                "total": group.total,
                "passed": group.passed,
                "ok": group.ok,
                "failed": list(group.failed_children),
            }
            for group in report.groups()
        ],
        "cases": list(records) if records else [_result_to_dict(result) for result in report],
    }
    validate(instance=payload, schema=JSON_SCHEMA_V1)
    return payload


def _result_to_dict(result: TestResult) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "name": result.name,
        "outcome": result.outcome.value,
        "duration_ms": result.duration_s * 1000,
    }
    if result.reason:
        record["reason"] = result.reason
    if result.diagnostic:
        record["diagnostic"] = _jsonify(result.diagnostic)
    return record


def _jsonify(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _jsonify(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify(item) for item in value]
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
