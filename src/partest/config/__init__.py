"""Run configuration: options model, YAML loading and precondition checks."""
from .loader import CONFIG_SCHEMA, build_options, check_options, load_config
from .models import COVERAGE_OPTION_FIELDS, DEFAULT_COVERAGE_TEST_LIMIT, RunOptions

__all__ = [
    "CONFIG_SCHEMA",
    "COVERAGE_OPTION_FIELDS",
    "DEFAULT_COVERAGE_TEST_LIMIT",
    "RunOptions",
    "build_options",
    "check_options",
    "load_config",
]
