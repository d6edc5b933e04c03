"""JSON reporter emitting a structured run summary."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
import time
from typing import Any, Dict, Sequence

from jsonschema import validate

from partest.config.models import RunOptions
from partest.core.models import ExecutableUnit, RunResult
from partest.errors import ReportError

from .base import Reporter
from .schema import RESULTS_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Writes the run summary to a JSON file validated against the schema."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)
        self._records: list[Dict[str, Any]] = []
        self._options: RunOptions | None = None
        self._start_time = 0.0

    def on_start(self, units: Sequence[ExecutableUnit], options: RunOptions) -> None:
        self._options = options
        self._records.clear()
        self._start_time = time.perf_counter()

    def on_unit_result(self, result: RunResult, index: int, total: int) -> None:
        self._records.append(_result_to_dict(result))

    def on_complete(self, exit_code: int) -> None:
        if self._options is None:
            return
        records = sorted(self._records, key=lambda record: record["id"])
        payload = {
            "schema_version": SCHEMA_VERSION,
            "generated_at": dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "summary": _build_summary(self._options, records, exit_code, time.perf_counter() - self._start_time),
            "units": records,
        }
        validate(instance=payload, schema=RESULTS_SCHEMA_V1)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise ReportError(f"Failed to write JSON report to {self._path}: {exc}") from exc


def _build_summary(
    options: RunOptions, records: Sequence[Dict[str, Any]], exit_code: int, duration: float
) -> Dict[str, Any]:
    return {
        "total": len(records),
        "passed": sum(1 for record in records if record["status"] == "passed"),
        "failed": sum(1 for record in records if record["status"] == "failed"),
        "errors": sum(1 for record in records if record["status"] == "error"),
        "exit_code": exit_code,
        "order_by": options.order_by,
        "seed": options.random_order_seed,
        "processes": options.processes,
        "duration_s": duration,
    }


def _result_to_dict(result: RunResult) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": result.unit.identifier(),
        "kind": result.unit.kind,
        "status": result.label,
        "exit_status": result.status,
        "duration_ms": result.duration_s * 1000,
    }
    if result.error:
        record["error"] = result.error
    return record
