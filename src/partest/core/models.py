"""Core dataclasses shared across partest subsystems."""
from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from partest.coverage.models import CoverageData


EXIT_NO_RESULT = -1
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_ERROR = 2
EXIT_FATAL = 255

UnitKind = str  # Alias for readability ("suite" or "method").


class RunState(str, enum.Enum):
    """States of the dispatch loop."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ExecutableUnit:
    """An independently runnable suite or test method."""

    path: Path
    name: Optional[str] = None
    kind: UnitKind = "suite"
    log_path: Optional[Path] = None
    coverage_path: Optional[Path] = None

    def identifier(self) -> str:
        if self.name:
            return f"{self.path.as_posix()}::{self.name}"
        return self.path.as_posix()

    def bind(self, run_dir: Path, index: int) -> "ExecutableUnit":
        """Return a copy pointing at its artifact locations inside ``run_dir``."""

        stem = f"unit-{index:05d}"
        return dataclasses.replace(
            self,
            log_path=run_dir / f"{stem}.xml",
            coverage_path=run_dir / f"{stem}.coverage.json",
        )


@dataclass
class RunResult:
    """Outcome of executing a single unit."""

    unit: ExecutableUnit
    status: int
    coverage: Optional["CoverageData"] = None
    log_path: Optional[Path] = None
    duration_s: float = 0.0
    output: str = ""
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == EXIT_SUCCESS

    @property
    def label(self) -> str:
        if self.status == EXIT_SUCCESS:
            return "passed"
        if self.status == EXIT_FAILURE:
            return "failed"
        return "error"
