"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

import time
from typing import Sequence

import click

from partest.config.models import RunOptions
from partest.core.models import ExecutableUnit, RunResult

from .base import Reporter

STATUS_COLORS = {
    "passed": "green",
    "failed": "red",
    "error": "yellow",
}

OUTPUT_TAIL_LINES = 20


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout."""

    def __init__(self, *, use_color: bool = True, verbose: bool = False) -> None:
        self._use_color = use_color
        self._verbose = verbose
        self._start_time = 0.0
        self._counts = {"passed": 0, "failed": 0, "error": 0}
        self._failures: list[tuple[int, RunResult]] = []

    def on_start(self, units: Sequence[ExecutableUnit], options: RunOptions) -> None:
        self._start_time = time.perf_counter()
        self._counts = {key: 0 for key in self._counts}
        self._failures.clear()
        kind = "method(s)" if options.functional else "suite(s)"
        seed = f" seed={options.random_order_seed}" if options.random_order_seed is not None else ""
        click.echo(
            self._styled(
                f"Running {len(units)} {kind} with {options.processes} process(es) "
                f"order={options.order_by}{seed}",
                force_color="cyan",
            )
        )

    def on_unit_result(self, result: RunResult, index: int, total: int) -> None:
        label = result.label
        self._counts[label] += 1
        ms = result.duration_s * 1000
        status_text = self._styled(label.upper())
        click.echo(f"[{index}/{total}] {result.unit.identifier()} -> {status_text} ({ms:.2f} ms)")
        if not result.passed:
            self._failures.append((index, result))
            if self._verbose:
                self._print_failure_details(result)

    def on_complete(self, exit_code: int) -> None:
        duration = time.perf_counter() - self._start_time
        total = sum(self._counts.values())
        click.echo(
            self._styled(
                f"Summary: total={total} passed={self._counts['passed']} failed={self._counts['failed']} "
                f"errors={self._counts['error']} exit_code={exit_code} duration={duration:.2f}s",
                force_color="cyan",
            )
        )
        if self._failures:
            click.echo(self._styled("Failure details:", force_color="red"))
            for index, result in self._failures:
                click.echo(f"  [{index}] {result.unit.identifier()} -> status {result.status}")
                self._print_failure_details(result, indent="    ")

    def _styled(self, text: str, *, force_color: str | None = None) -> str:
        if not self._use_color:
            return text
        color = force_color or STATUS_COLORS.get(text.lower(), None)
        if color:
            return click.style(text, fg=color)
        return text

    def _print_failure_details(self, result: RunResult, *, indent: str = "    ") -> None:
        if result.error:
            click.echo(f"{indent}error: {result.error}")
        output = result.output.strip()
        if not output:
            return
        for line in output.splitlines()[-OUTPUT_TAIL_LINES:]:
            click.echo(f"{indent}| {line}")
