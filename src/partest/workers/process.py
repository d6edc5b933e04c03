"""Worker pool running each unit as a child process."""
from __future__ import annotations

import os
import shutil
import subprocess
import sys
import time
from concurrent import futures
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from partest.config.models import RunOptions
from partest.core.models import EXIT_ERROR, ExecutableUnit, RunResult
from partest.errors import CoordinatorError, WorkerError

from .base import WorkerHandle, WorkerPool

DEFAULT_COMMAND = (sys.executable, "-m", "pytest", "-q", "-p", "no:cacheprovider", "{unit}", "--junitxml={log}")
DEFAULT_COVERAGE_ARGS = ("--cov", "--cov-report=json:{coverage}")


@dataclass(frozen=True)
class ProcessOutcome:
    returncode: int
    output: str
    duration_s: float
    error: Optional[str] = None


class ProcessWorkerPool(WorkerPool):
    """Launches one process per unit; threads only wait on their child.

    Results are read back by :meth:`poll` on the caller's thread, and
    :meth:`wait` blocks on the futures instead of sleeping.
    """

    def __init__(
        self,
        capacity: int,
        command: Optional[Sequence[str]] = None,
        *,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        coverage: bool = False,
        cwd: Optional[Path] = None,
    ) -> None:
        super().__init__(capacity)
        if command is None:
            command = DEFAULT_COMMAND + (DEFAULT_COVERAGE_ARGS if coverage else ())
        self.command = tuple(command)
        self._env = dict(env or {})
        self._timeout = timeout
        self._cwd = cwd
        self._executor: Optional[futures.ThreadPoolExecutor] = None

    @classmethod
    def from_options(cls, options: RunOptions) -> "ProcessWorkerPool":
        return cls(
            options.processes,
            options.command,
            env=options.env,
            timeout=options.timeout,
            coverage=options.has_coverage,
        )

    def start(self) -> None:
        try:
            self._executor = futures.ThreadPoolExecutor(
                max_workers=self.capacity, thread_name_prefix="partest-worker"
            )
        except (RuntimeError, OSError, ValueError) as exc:
            raise CoordinatorError(f"Unable to start worker pool: {exc}") from exc
        super().start()

    def _launch(self, handle: WorkerHandle) -> futures.Future:
        if self._executor is None:
            raise CoordinatorError("worker pool has not been started")
        tokens = build_tokens(handle.unit, handle.token)
        argv = [render_template(part, tokens) for part in self.command]
        if shutil.which(argv[0]) is None:
            raise WorkerError(f"worker executable '{argv[0]}' not found")
        env = os.environ.copy()
        env.update({key: render_template(value, tokens) for key, value in self._env.items()})
        env.update(
            {
                "PARTEST_TOKEN": str(handle.token),
                "PARTEST_UNIT": tokens["unit"],
                "PARTEST_LOG": tokens["log"],
                "PARTEST_COVERAGE": tokens["coverage"],
            }
        )
        try:
            return self._executor.submit(_run_process, argv, env, self._cwd, self._timeout)
        except RuntimeError as exc:
            raise CoordinatorError(f"Unable to schedule {handle.unit.identifier()}: {exc}") from exc

    def _result(self, handle: WorkerHandle) -> Optional[RunResult]:
        future: futures.Future = handle.payload
        if not future.done():
            return None
        try:
            outcome: ProcessOutcome = future.result()
        except Exception as exc:
            return RunResult(unit=handle.unit, status=EXIT_ERROR, error=f"worker failed: {exc}")
        status = outcome.returncode if outcome.returncode >= 0 else EXIT_ERROR
        log_path = handle.unit.log_path
        return RunResult(
            unit=handle.unit,
            status=status,
            log_path=log_path if log_path is not None and log_path.exists() else None,
            duration_s=outcome.duration_s,
            output=outcome.output,
            error=outcome.error,
        )

    def wait(self, handles: Sequence[WorkerHandle], timeout: float) -> None:
        pending = [handle.payload for handle in handles if handle.payload is not None]
        if not pending:
            return
        futures.wait(pending, timeout=timeout, return_when=futures.FIRST_COMPLETED)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
        super().close()


def _run_process(
    argv: Sequence[str], env: Mapping[str, str], cwd: Optional[Path], timeout: Optional[float]
) -> ProcessOutcome:
    start = time.perf_counter()
    try:
        proc = subprocess.run(
            list(argv),
            cwd=str(cwd) if cwd else None,
            env=dict(env),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        output = exc.output if isinstance(exc.output, str) else ""
        return ProcessOutcome(
            returncode=EXIT_ERROR,
            output=output,
            duration_s=time.perf_counter() - start,
            error=f"timed out after {timeout}s",
        )
    except OSError as exc:
        return ProcessOutcome(
            returncode=EXIT_ERROR, output="", duration_s=time.perf_counter() - start, error=str(exc)
        )
    return ProcessOutcome(
        returncode=proc.returncode, output=proc.stdout or "", duration_s=time.perf_counter() - start
    )


def build_tokens(unit: ExecutableUnit, token: int) -> Dict[str, str]:
    tokens: Dict[str, str] = {}
    tokens["unit"] = unit.identifier()
    tokens["path"] = str(unit.path)
    tokens["name"] = unit.name or ""
    tokens["log"] = str(unit.log_path) if unit.log_path else ""
    tokens["coverage"] = str(unit.coverage_path) if unit.coverage_path else ""
    tokens["token"] = str(token)
    tokens["python"] = sys.executable
    return tokens


def render_template(value: str, tokens: Mapping[str, str]) -> str:
    if "{" in value and "}" in value:
        try:
            return value.format(**tokens)
        except KeyError as exc:
            available = ", ".join(sorted(tokens.keys()))
            raise WorkerError(f"Unknown token {exc} in value '{value}'. Available tokens: {available}") from exc
        except (IndexError, ValueError) as exc:
            raise WorkerError(f"Invalid template '{value}': {exc}") from exc
    return value
