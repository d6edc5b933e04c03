"""JSON schema definition for the run summary report."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

RESULTS_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "partest run report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "units"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "errors", "exit_code", "order_by", "processes", "duration_s"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "errors": {"type": "integer"},
                "exit_code": {"type": "integer"},
                "order_by": {"type": "string"},
                "seed": {"type": ["integer", "null"]},
                "processes": {"type": "integer"},
                "duration_s": {"type": "number"},
            },
        },
        "units": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "kind", "status", "exit_status", "duration_ms"],
                "properties": {
                    "id": {"type": "string"},
                    "kind": {"type": "string"},
                    "status": {"type": "string", "enum": ["passed", "failed", "error"]},
                    "exit_status": {"type": "integer"},
                    "duration_ms": {"type": "number"},
                    "error": {"type": "string"},
                },
            },
        },
    },
}
