"""Reporter interface definitions."""
from __future__ import annotations

from typing import List, Sequence

from partest.config.models import RunOptions
from partest.core.models import ExecutableUnit, RunResult


class Reporter:
    """Interface for run lifecycle observers."""

    def on_start(self, units: Sequence[ExecutableUnit], options: RunOptions) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_unit_result(self, result: RunResult, index: int, total: int) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(self, exit_code: int) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def start(self, units: Sequence[ExecutableUnit], options: RunOptions) -> None:
        for reporter in self._reporters:
            reporter.on_start(units, options)

    def handle_result(self, result: RunResult, index: int, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_unit_result(result, index, total)

    def complete(self, exit_code: int) -> None:
        for reporter in self._reporters:
            reporter.on_complete(exit_code)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)
