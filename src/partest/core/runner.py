"""Coordinator dispatching units to workers and finalizing the run."""
from __future__ import annotations

import dataclasses
import shutil
import tempfile
from collections import deque
from pathlib import Path
from typing import Any, Deque, List, Optional, Sequence

from partest import console
from partest.config.loader import check_options
from partest.config.models import RunOptions
from partest.coverage.accumulator import CoverageAccumulator
from partest.coverage.models import CoverageData
from partest.coverage.renderers import RendererRegistry, RenderOptions, renderer_registry, sink_for
from partest.coverage.snapshot import load_snapshot
from partest.discovery.suite_loader import SuiteLoader
from partest.errors import ArtifactError, CoordinatorError, ReportError, WorkerError
from partest.junit import LogInterpreter, LogReader, Writer
from partest.reporting import JsonReporter, Reporter, ReportManager, TerminalReporter
from partest.workers.process import ProcessWorkerPool

from .interfaces import LoaderProtocol, WorkerPoolProtocol
from .models import EXIT_ERROR, EXIT_FATAL, EXIT_NO_RESULT, ExecutableUnit, RunResult, RunState
from .ordering import build_queue, resolve_seed

# Upper bound, in seconds, of one wait between completion checks.
CYCLE_SLEEP = 0.01


class Runner:
    """Runs a set of units in parallel and tallies a single exit code.

    All aggregate state (exit code, coverage, log readers) lives on the
    instance and is only touched from the thread calling :meth:`run`.
    """

    def __init__(
        self,
        options: RunOptions,
        *,
        loader: Optional[LoaderProtocol] = None,
        pool: Optional[WorkerPoolProtocol] = None,
        reporters: Optional[Sequence[Reporter]] = None,
        renderers: Optional[RendererRegistry] = None,
        render_options: Optional[RenderOptions] = None,
    ) -> None:
        self._options = options
        self._loader = loader
        self._pool = pool
        if reporters is None:
            reporters = _default_reporters(options)
        self._reporters = ReportManager(reporters)
        self._renderers = renderers or renderer_registry
        self._render_options = render_options
        self._interpreter = LogInterpreter()
        self._coverage: Optional[CoverageAccumulator] = None
        self._pending: List[ExecutableUnit] = []
        self._exit_code = EXIT_NO_RESULT
        self._state = RunState.IDLE
        self._run_dir: Optional[Path] = None
        self._collected = 0
        self._failed_reports: List[str] = []

    @property
    def exit_code(self) -> int:
        """Highest status reported by any unit; ``-1`` until a result arrives."""

        return self._exit_code

    def get_exit_code(self) -> int:
        return self._exit_code

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def interpreter(self) -> LogInterpreter:
        return self._interpreter

    @property
    def coverage(self) -> Optional[CoverageAccumulator]:
        return self._coverage

    @property
    def failed_reports(self) -> List[str]:
        return list(self._failed_reports)

    def run(self) -> None:
        self.before_load_checks()
        aborted = True
        try:
            self._run_dir = _create_run_dir()
            self.load()
            self.do_run()
            aborted = False
        except CoordinatorError as exc:
            self._exit_code = EXIT_FATAL
            console.error(f"Run aborted: {exc}", use_color=self._options.colors)
            raise
        finally:
            self.complete(aborted=aborted)

    def before_load_checks(self) -> None:
        check_options(self._options)
        seed = resolve_seed(self._options.order_by, self._options.random_order_seed)
        if seed != self._options.random_order_seed:
            self._options = dataclasses.replace(self._options, random_order_seed=seed)
        if self._options.has_coverage:
            self._coverage = CoverageAccumulator(self._options.coverage_test_limit)

    def load(self) -> None:
        """Build the pending queue from the loader, ordered per the options."""

        loader = self._loader
        if loader is None:
            loader = SuiteLoader(
                self._options.path,
                functional=self._options.functional,
                filters=self._options.filter,
            )
        loader.load()
        ordered = build_queue(loader.units(), self._options.order_by, self._options.random_order_seed)
        run_dir = self._run_dir or _create_run_dir()
        self._run_dir = run_dir
        self._pending = [unit.bind(run_dir, index) for index, unit in enumerate(ordered, start=1)]

    def do_run(self) -> None:
        pool = self._pool
        if pool is None:
            pool = ProcessWorkerPool.from_options(self._options)
            self._pool = pool
        pool.start()
        queue: Deque[ExecutableUnit] = deque(self._pending)
        in_flight: List[Any] = []
        self._reporters.start(self._pending, self._options)
        while queue or in_flight:
            self._state = RunState.DISPATCHING
            while queue and len(in_flight) < pool.capacity:
                unit = queue.popleft()
                try:
                    in_flight.append(pool.dispatch(unit))
                except (WorkerError, OSError) as exc:
                    self._collect(RunResult(unit=unit, status=EXIT_ERROR, error=f"dispatch failed: {exc}"))
            if in_flight:
                self._state = RunState.DRAINING
                self._drain(pool, in_flight)
        self._state = RunState.COMPLETE

    def _drain(self, pool: WorkerPoolProtocol, in_flight: List[Any]) -> None:
        """Block until at least one in-flight unit has been collected."""

        while True:
            running: List[Any] = []
            collected = 0
            for handle in in_flight:
                result = pool.poll(handle)
                if result is None:
                    running.append(handle)
                    continue
                self._collect(result)
                collected += 1
            in_flight[:] = running
            if collected:
                return
            pool.wait(in_flight, CYCLE_SLEEP)

    def _collect(self, result: RunResult) -> None:
        self._collected += 1
        self._exit_code = max(self._exit_code, result.status)
        if self._coverage is not None:
            snapshot = result.coverage if result.coverage is not None else self._load_coverage(result.unit)
            if snapshot is not None:
                self._coverage.fold(snapshot)
        if result.log_path is not None:
            self._interpreter.add_reader(LogReader(result.log_path, result.unit.identifier()))
        self._reporters.handle_result(result, self._collected, len(self._pending))

    def _load_coverage(self, unit: ExecutableUnit) -> Optional[CoverageData]:
        if unit.coverage_path is None:
            return None
        try:
            snapshot = load_snapshot(unit.coverage_path)
        except ArtifactError as exc:
            self._warn(f"coverage of {unit.identifier()} skipped: {exc}")
            return None
        unit.coverage_path.unlink(missing_ok=True)
        return snapshot

    def complete(self, *, aborted: bool = False) -> None:
        """Write the requested reports, then release every held resource.

        After an aborted run only the release step happens.
        """

        try:
            if not aborted:
                self._notify_complete()
                self.log()
                self.log_coverage()
        finally:
            self._release()

    def _notify_complete(self) -> None:
        try:
            self._reporters.complete(self._exit_code)
        except ReportError as exc:
            self._failed_reports.append("results")
            self._warn(str(exc))

    def log(self) -> None:
        """Write the consolidated JUnit log if requested."""

        if self._options.log_junit is None:
            return
        writer = Writer(self._interpreter, self._options.path)
        try:
            writer.write(self._options.log_junit, on_warning=self._warn)
        except (OSError, ValueError) as exc:
            self._failed_reports.append("junit")
            self._warn(f"unable to write JUnit log to {self._options.log_junit}: {exc}")

    def log_coverage(self) -> None:
        """Render every requested coverage format, each independently of the others."""

        if self._coverage is None:
            return
        coverage = self._coverage.report()
        render_options = self._render_options or RenderOptions(
            colors=self._options.colors, name=Path(self._options.path).resolve().name or "partest"
        )
        for fmt, destination in self._options.coverage_outputs().items():
            try:
                self._write_coverage(fmt, destination, coverage, render_options)
            except ReportError as exc:
                self._failed_reports.append(fmt)
                self._warn(str(exc))

    def _write_coverage(
        self, fmt: str, destination: str, coverage: CoverageData, render_options: RenderOptions
    ) -> None:
        try:
            renderer = self._renderers.get(fmt)
        except KeyError as exc:
            raise ReportError(f"no renderer for coverage format '{fmt}'") from exc
        sink = sink_for(destination, renderer)
        try:
            sink.write(renderer.render(coverage, render_options))
        except Exception as exc:  # one format failing must not stop the others
            raise ReportError(f"coverage report '{fmt}' could not be written to {sink.describe()}: {exc}") from exc
        if self._options.verbose:
            console.info(f"Coverage ({fmt}) written to {sink.describe()}", use_color=self._options.colors)

    def _release(self) -> None:
        try:
            if self._pool is not None:
                self._pool.close()
        finally:
            self._interpreter.remove_logs()
            if self._run_dir is not None:
                shutil.rmtree(self._run_dir, ignore_errors=True)
                self._run_dir = None

    def _warn(self, message: str) -> None:
        console.warn(message, use_color=self._options.colors)


def _default_reporters(options: RunOptions) -> List[Reporter]:
    reporters: List[Reporter] = [TerminalReporter(use_color=options.colors, verbose=options.verbose)]
    if options.log_json:
        reporters.append(JsonReporter(options.log_json))
    return reporters


def _create_run_dir() -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix="partest-"))
    except OSError as exc:
        raise CoordinatorError(f"Unable to create scratch directory: {exc}") from exc
