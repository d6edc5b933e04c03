"""Collaborator contracts the coordinator depends on."""
from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence

from .models import ExecutableUnit, RunResult


class LoaderProtocol(Protocol):
    """Discovers the executable units of a run."""

    def load(self) -> None:
        ...

    def units(self) -> List[ExecutableUnit]:
        ...


class WorkerPoolProtocol(Protocol):
    """Runs units in worker processes and reports their results."""

    capacity: int

    def start(self) -> None:
        ...

    def dispatch(self, unit: ExecutableUnit) -> Any:
        ...

    def poll(self, handle: Any) -> Optional[RunResult]:
        ...

    def wait(self, handles: Sequence[Any], timeout: float) -> None:
        ...

    def close(self) -> None:
        ...
