"""Injectable collaborators for coordinator tests."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from partest.core.models import ExecutableUnit, RunResult
from partest.coverage.models import CoverageData
from partest.errors import CoordinatorError, WorkerError
from partest.reporting import Reporter
from partest.workers import WorkerHandle, WorkerPool

JUNIT_TEMPLATE = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<testsuites><testsuite name="{name}" tests="1" failures="{failures}" errors="0" skipped="0" time="0.5">'
    '<testcase classname="{name}" name="test_case" time="0.5"/>'
    "</testsuite></testsuites>"
)


def make_units(*names: str) -> List[ExecutableUnit]:
    return [ExecutableUnit(path=Path(f"tests/test_{name}.py")) for name in names]


def unit_id(name: str) -> str:
    return f"tests/test_{name}.py"


class FakeLoader:
    def __init__(self, units: Sequence[ExecutableUnit]) -> None:
        self._units = list(units)
        self.loaded = False

    def load(self) -> None:
        self.loaded = True

    def units(self) -> List[ExecutableUnit]:
        return list(self._units)


class FakeWorkerPool(WorkerPool):
    """Completes one in-flight unit per ``wait`` call.

    The unit completed is the in-flight one listed earliest in
    ``completion_order``; units not listed complete in dispatch order.
    """

    def __init__(
        self,
        outcomes: Mapping[str, int],
        capacity: int = 2,
        *,
        coverage: Optional[Mapping[str, CoverageData]] = None,
        completion_order: Optional[Sequence[str]] = None,
        write_logs: bool = False,
        fail_dispatch: Iterable[str] = (),
        fatal_on: Optional[str] = None,
    ) -> None:
        super().__init__(capacity)
        self._outcomes = dict(outcomes)
        self._coverage = dict(coverage or {})
        self._order = list(completion_order or ())
        self._write_logs = write_logs
        self._fail_dispatch = set(fail_dispatch)
        self._fatal_on = fatal_on
        self._done: Dict[int, bool] = {}
        self.dispatched: List[str] = []
        self.collected: List[str] = []
        self.wait_calls = 0
        self.started = False
        self.closed = False

    def start(self) -> None:
        self.started = True
        super().start()

    def _launch(self, handle: WorkerHandle) -> str:
        identifier = handle.unit.identifier()
        if identifier == self._fatal_on:
            raise CoordinatorError("cannot allocate any worker")
        if identifier in self._fail_dispatch:
            raise WorkerError(f"cannot launch {identifier}")
        self.dispatched.append(identifier)
        self._done[id(handle)] = False
        return identifier

    def _result(self, handle: WorkerHandle) -> Optional[RunResult]:
        if not self._done.get(id(handle)):
            return None
        identifier = handle.payload
        self.collected.append(identifier)
        status = self._outcomes.get(identifier, 0)
        log_path = None
        if self._write_logs and handle.unit.log_path is not None:
            log_path = handle.unit.log_path
            log_path.parent.mkdir(parents=True, exist_ok=True)
            log_path.write_text(
                JUNIT_TEMPLATE.format(name=identifier, failures=1 if status else 0), encoding="utf-8"
            )
        coverage = self._coverage.get(identifier)
        return RunResult(
            unit=handle.unit,
            status=status,
            coverage=coverage.copy() if coverage is not None else None,
            log_path=log_path,
            duration_s=0.01,
        )

    def wait(self, handles: Sequence[WorkerHandle], timeout: float) -> None:
        self.wait_calls += 1
        if not handles:
            return

        def rank(handle: WorkerHandle) -> int:
            identifier = handle.payload
            if identifier in self._order:
                return self._order.index(identifier)
            return len(self._order) + self.dispatched.index(identifier)

        self._done[id(min(handles, key=rank))] = True

    def close(self) -> None:
        self.closed = True
        super().close()


class RecordingReporter(Reporter):
    def __init__(self) -> None:
        self.started_with: List[str] = []
        self.options = None
        self.results: List[RunResult] = []
        self.exit_code: Optional[int] = None

    def on_start(self, units, options) -> None:
        self.started_with = [unit.identifier() for unit in units]
        self.options = options

    def on_unit_result(self, result: RunResult, index: int, total: int) -> None:
        self.results.append(result)

    def on_complete(self, exit_code: int) -> None:
        self.exit_code = exit_code
