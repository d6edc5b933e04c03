from __future__ import annotations

import json
from pathlib import Path

import pytest

from partest.config import RunOptions
from partest.core import ExecutableUnit, RunResult
from partest.errors import ReportError
from partest.reporting import JsonReporter, ReportManager, TerminalReporter


def _results() -> list[RunResult]:
    ok = ExecutableUnit(path=Path("tests/test_ok.py"))
    bad = ExecutableUnit(path=Path("tests/test_bad.py"))
    broken = ExecutableUnit(path=Path("tests/test_broken.py"))
    return [
        RunResult(unit=ok, status=0, duration_s=0.002),
        RunResult(unit=bad, status=1, duration_s=0.004, output="line 1\nassert 1 == 2\n"),
        RunResult(unit=broken, status=2, error="dispatch failed: boom"),
    ]


def test_terminal_reporter_prints_progress_and_failures(capsys) -> None:
    results = _results()
    reporter = TerminalReporter(use_color=False)
    options = RunOptions(processes=2, order_by="random", random_order_seed=5)
    reporter.on_start([result.unit for result in results], options)
    for index, result in enumerate(results, start=1):
        reporter.on_unit_result(result, index, len(results))
    reporter.on_complete(2)
    output = capsys.readouterr().out
    assert "Running 3 suite(s) with 2 process(es) order=random seed=5" in output
    assert "[2/3] tests/test_bad.py -> FAILED" in output
    assert "Summary: total=3 passed=1 failed=1 errors=1 exit_code=2" in output
    assert "Failure details:" in output
    assert "| assert 1 == 2" in output
    assert "error: dispatch failed: boom" in output


def test_json_reporter_writes_sorted_summary(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "run.json"
    reporter = JsonReporter(str(path))
    manager = ReportManager([reporter])
    results = _results()
    manager.start([result.unit for result in results], RunOptions(processes=4))
    for index, result in enumerate(results, start=1):
        manager.handle_result(result, index, len(results))
    manager.complete(2)
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["summary"]["total"] == 3
    assert payload["summary"]["errors"] == 1
    assert payload["summary"]["exit_code"] == 2
    assert payload["summary"]["processes"] == 4
    assert [unit["id"] for unit in payload["units"]] == [
        "tests/test_bad.py",
        "tests/test_broken.py",
        "tests/test_ok.py",
    ]
    assert payload["units"][1]["error"] == "dispatch failed: boom"
    assert payload["generated_at"].endswith("Z")
    assert manager.reporters() == [reporter]


def test_json_reporter_write_failure_is_a_report_error(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    reporter = JsonReporter(str(blocker / "run.json"))
    reporter.on_start([], RunOptions())
    with pytest.raises(ReportError):
        reporter.on_complete(-1)
