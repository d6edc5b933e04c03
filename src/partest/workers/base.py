"""Worker pool abstractions."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from partest.core.models import ExecutableUnit, RunResult
from partest.errors import CoordinatorError


@dataclass
class WorkerHandle:
    """A dispatched unit occupying one worker slot."""

    unit: ExecutableUnit
    token: int
    started_at: float = field(default_factory=time.perf_counter)
    payload: Any = None


class WorkerPool:
    """Base class for worker pools.

    Subclasses implement :meth:`_launch` and :meth:`_result`; the base class
    hands out slot tokens (``1..capacity``) and provides the poll-sleep
    :meth:`wait` used when no native completion signal is available.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"worker capacity must be >= 1 (got {capacity})")
        self.capacity = capacity
        self._free_tokens: List[int] = list(range(1, capacity + 1))
        self._started = False

    @property
    def available(self) -> int:
        return len(self._free_tokens)

    def start(self) -> None:
        self._started = True

    def dispatch(self, unit: ExecutableUnit) -> WorkerHandle:
        if not self._started:
            raise CoordinatorError("worker pool has not been started")
        if not self._free_tokens:
            raise CoordinatorError(f"no free worker slot for {unit.identifier()}")
        token = self._free_tokens.pop(0)
        handle = WorkerHandle(unit=unit, token=token)
        try:
            handle.payload = self._launch(handle)
        except BaseException:
            self._release(token)
            raise
        return handle

    def poll(self, handle: WorkerHandle) -> Optional[RunResult]:
        result = self._result(handle)
        if result is not None:
            self._release(handle.token)
        return result

    def wait(self, handles: Sequence[WorkerHandle], timeout: float) -> None:
        time.sleep(timeout)

    def close(self) -> None:
        self._started = False

    def _release(self, token: int) -> None:
        self._free_tokens.append(token)
        self._free_tokens.sort()

    def _launch(self, handle: WorkerHandle) -> Any:
        raise NotImplementedError

    def _result(self, handle: WorkerHandle) -> Optional[RunResult]:
        raise NotImplementedError
