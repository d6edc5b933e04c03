"""Run configuration model."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

DEFAULT_COVERAGE_TEST_LIMIT = 10

# Coverage format name -> RunOptions attribute holding its destination.
COVERAGE_OPTION_FIELDS = {
    "text": "coverage_text",
    "json": "coverage_json",
    "cobertura": "coverage_cobertura",
    "clover": "coverage_clover",
    "lcov": "coverage_lcov",
    "html": "coverage_html",
}


def _default_processes() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class RunOptions:
    path: str = "."
    processes: int = field(default_factory=_default_processes)
    functional: bool = False
    order_by: str = "default"
    random_order_seed: Optional[int] = None
    filter: Sequence[str] = field(default_factory=tuple)
    command: Optional[Sequence[str]] = None
    env: Mapping[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None
    coverage_test_limit: int = DEFAULT_COVERAGE_TEST_LIMIT
    coverage_text: Optional[str] = None
    coverage_json: Optional[str] = None
    coverage_cobertura: Optional[str] = None
    coverage_clover: Optional[str] = None
    coverage_lcov: Optional[str] = None
    coverage_html: Optional[str] = None
    log_junit: Optional[str] = None
    log_json: Optional[str] = None
    colors: bool = True
    verbose: bool = False

    def coverage_outputs(self) -> Dict[str, str]:
        """Requested coverage formats mapped to their destination (``""`` = console)."""

        outputs: Dict[str, str] = {}
        for fmt, attr in COVERAGE_OPTION_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                outputs[fmt] = value
        return outputs

    @property
    def has_coverage(self) -> bool:
        return bool(self.coverage_outputs())
