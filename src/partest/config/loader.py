"""YAML config loading, option merging and precondition checks."""
from __future__ import annotations

import dataclasses
import shlex
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from jsonschema import Draft7Validator

from partest.core.ordering import ORDER_POLICIES, ORDER_RANDOM
from partest.errors import ConfigurationError

from .models import COVERAGE_OPTION_FIELDS, RunOptions

_OPTIONAL_STRING = {"type": ["string", "null"]}

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "partest config",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "path": {"type": "string", "minLength": 1},
        "processes": {"type": "integer"},
        "functional": {"type": "boolean"},
        "order_by": {"type": "string", "enum": list(ORDER_POLICIES)},
        "random_order_seed": {"type": ["integer", "null"]},
        "filter": {"type": "array", "items": {"type": "string"}},
        "command": {
            "oneOf": [
                {"type": "string", "minLength": 1},
                {"type": "array", "minItems": 1, "items": {"type": "string"}},
            ]
        },
        "env": {"type": "object", "additionalProperties": {"type": ["string", "number", "boolean"]}},
        "timeout": {"type": ["number", "null"], "exclusiveMinimum": 0},
        "coverage_test_limit": {"type": "integer"},
        "log_junit": _OPTIONAL_STRING,
        "log_json": _OPTIONAL_STRING,
        "colors": {"type": "boolean"},
        "verbose": {"type": "boolean"},
        **{attr: _OPTIONAL_STRING for attr in COVERAGE_OPTION_FIELDS.values()},
    },
}
_validator = Draft7Validator(CONFIG_SCHEMA)


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load and validate a YAML config file, returning RunOptions keyword arguments."""

    config_path = Path(path).expanduser().resolve()
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Unable to read config file {config_path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigurationError(f"Config schema validation failed: {messages}")
    values: Dict[str, Any] = dict(raw)
    if "path" in values:
        values["path"] = str((config_path.parent / values["path"]).resolve())
    if "command" in values:
        values["command"] = _normalize_command(values["command"])
    if "filter" in values:
        values["filter"] = tuple(values["filter"])
    if "env" in values:
        values["env"] = {str(k): str(v) for k, v in values["env"].items()}
    return values


def build_options(config: Mapping[str, Any] | None = None, **overrides: Any) -> RunOptions:
    """Merge defaults, config file values and CLI overrides (``None`` means unset)."""

    values: Dict[str, Any] = dict(config or {})
    for key, value in overrides.items():
        if value is not None:
            values[key] = value
    known = {f.name for f in dataclasses.fields(RunOptions)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unknown option(s): {', '.join(unknown)}")
    return RunOptions(**values)


def check_options(options: RunOptions) -> None:
    """Reject invalid or contradictory options before any unit is dispatched."""

    if options.processes < 1:
        raise ConfigurationError(f"processes must be >= 1 (got {options.processes})")
    if options.coverage_test_limit < 0:
        raise ConfigurationError(f"coverage_test_limit must be >= 0 (got {options.coverage_test_limit})")
    if options.order_by not in ORDER_POLICIES:
        supported = ", ".join(ORDER_POLICIES)
        raise ConfigurationError(f"Unknown order policy '{options.order_by}'. Supported: {supported}")
    if options.random_order_seed is not None and options.order_by != ORDER_RANDOM:
        raise ConfigurationError("random_order_seed requires order_by=random")
    if options.timeout is not None and options.timeout <= 0:
        raise ConfigurationError("timeout must be a positive number of seconds")
    if not Path(options.path).exists():
        raise ConfigurationError(f"Test path not found: {options.path}")
    if options.command is not None:
        joined = " ".join(options.command)
        if "{unit}" not in joined:
            raise ConfigurationError("command must reference the {unit} token")
        if options.has_coverage and "{coverage}" not in joined:
            raise ConfigurationError(
                "coverage output was requested but command never references the {coverage} token"
            )


def _normalize_command(raw: Any) -> tuple[str, ...]:
    if isinstance(raw, str):
        return tuple(shlex.split(raw))
    return tuple(str(part) for part in raw)
