"""Loading of the coverage artifacts workers leave behind."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from jsonschema import Draft7Validator

from partest.errors import ArtifactError

from .models import CoverageData, FileCoverage

_COUNT = {"type": ["integer", "boolean"], "minimum": 0}
_LINE_LIST = {"type": "array", "items": {"type": "integer"}}
_BRANCH_LIST = {
    "type": "array",
    "items": {"type": "array", "items": {"type": "integer"}, "minItems": 2, "maxItems": 2},
}

SNAPSHOT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "partest coverage snapshot",
    "type": "object",
    "required": ["files"],
    "properties": {
        "files": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "lines": {
                        "type": "object",
                        "propertyNames": {"pattern": "^[0-9]+$"},
                        "additionalProperties": _COUNT,
                    },
                    "branches": {
                        "type": "object",
                        "propertyNames": {"pattern": "^[0-9]+:-?[0-9]+$"},
                        "additionalProperties": _COUNT,
                    },
                    "executed_lines": _LINE_LIST,
                    "missing_lines": _LINE_LIST,
                    "executed_branches": _BRANCH_LIST,
                    "missing_branches": _BRANCH_LIST,
                },
            },
        },
    },
}
_validator = Draft7Validator(SNAPSHOT_SCHEMA)


def load_snapshot(path: Path) -> CoverageData:
    """Read a worker's coverage artifact into :class:`CoverageData`.

    Accepts the native ``lines``/``branches`` shape as well as the JSON report
    written by coverage.py (``executed_lines``/``missing_lines``).
    """

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ArtifactError(f"Coverage artifact not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise ArtifactError(f"Coverage artifact {path} is unreadable: {exc}") from exc
    return parse_snapshot(raw, source=str(path))


def parse_snapshot(raw: Any, *, source: str = "<memory>") -> CoverageData:
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ArtifactError(f"Coverage artifact {source} failed validation: {messages}")
    data = CoverageData()
    for file_path, entry in raw["files"].items():
        _parse_file(data.file(str(file_path)), entry)
    return data


def _parse_file(target: FileCoverage, entry: Mapping[str, Any]) -> None:
    for line, hits in (entry.get("lines") or {}).items():
        target.record_line(int(line), hits)
    for key, hits in (entry.get("branches") or {}).items():
        line, _, branch = key.partition(":")
        target.record_branch(int(line), int(branch), hits)
    # coverage.py JSON report shape
    for line in entry.get("executed_lines") or ():
        target.record_line(line, 1)
    for line in entry.get("missing_lines") or ():
        target.record_line(line, 0)
    for source_line, dest_line in entry.get("executed_branches") or ():
        target.record_branch(source_line, dest_line, 1)
    for source_line, dest_line in entry.get("missing_branches") or ():
        target.record_branch(source_line, dest_line, 0)
