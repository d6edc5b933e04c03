from __future__ import annotations

import json
import shlex
import sys
from pathlib import Path
from xml.etree import ElementTree as ET

from click.testing import CliRunner

from partest import __version__
from partest.cli.main import cli, main
from partest.core import build_queue
from partest.discovery import SuiteLoader

WORKER = """
import json, pathlib, sys
unit, log, coverage = sys.argv[1], sys.argv[2], sys.argv[3]
source = pathlib.Path(unit).read_text()
failed = "FAIL" in source
pathlib.Path(log).write_text(
    '<testsuite name="%s" tests="1" failures="%d" errors="0" skipped="0" time="0.01"/>'
    % (pathlib.Path(unit).stem, 1 if failed else 0)
)
if coverage:
    lines = json.loads(source[2:]) if source.startswith("# {") else {}
    pathlib.Path(coverage).write_text(json.dumps({"files": {"pkg/mod.py": {"lines": lines}}}))
sys.exit(1 if failed else 0)
"""


def _project(tmp_path: Path, sources: dict[str, str]) -> tuple[Path, str]:
    script = tmp_path / "worker.py"
    script.write_text(WORKER, encoding="utf-8")
    suite_dir = tmp_path / "suite"
    suite_dir.mkdir()
    for name, source in sources.items():
        (suite_dir / f"test_{name}.py").write_text(source, encoding="utf-8")
    command = " ".join(
        shlex.quote(part) for part in (sys.executable, str(script), "{path}", "{log}", "{coverage}")
    )
    return suite_dir, command


def test_cli_help_short_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "run" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"partest {__version__}"


def test_cli_run_reports_worst_status_and_junit_log(tmp_path: Path) -> None:
    suite_dir, command = _project(
        tmp_path,
        {"a": "x = 1\n", "b": "# FAIL\n", "c": "x = 1\n", "d": "# FAIL\n", "e": "x = 1\n"},
    )
    junit = tmp_path / "out" / "junit.xml"
    result = CliRunner().invoke(
        cli,
        ["run", str(suite_dir), "-p", "2", "--command", command, "--log-junit", str(junit), "--no-colors"],
    )
    assert result.exit_code == 1, result.output
    assert "Summary: total=5 passed=3 failed=2 errors=0 exit_code=1" in result.output
    root = ET.parse(junit).getroot()
    assert root.tag == "testsuites"
    assert root.get("tests") == "5"
    assert root.get("failures") == "2"
    assert [suite.get("name") for suite in root] == ["test_a", "test_b", "test_c", "test_d", "test_e"]


def test_cli_run_merges_coverage_from_every_unit(tmp_path: Path) -> None:
    suite_dir, command = _project(
        tmp_path,
        {
            "a": '# {"1": 1, "2": 0}\n',
            "b": '# {"2": 1, "3": 0}\n',
            "c": '# {"3": 0, "4": 2}\n',
        },
    )
    report = tmp_path / "coverage.json"
    result = CliRunner().invoke(
        cli,
        [
            "run",
            str(suite_dir),
            "-p",
            "3",
            "--command",
            command,
            "--coverage-json",
            str(report),
            "--coverage-test-limit",
            "1",
            "--no-colors",
        ],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["files"] == {"pkg/mod.py": {"lines": {"1": 1, "2": 1, "3": 0, "4": 2}, "branches": {}}}
    assert payload["totals"]["lines_found"] == 4
    assert payload["totals"]["lines_hit"] == 3


def test_cli_list_in_reverse_order(tmp_path: Path) -> None:
    suite_dir, _ = _project(tmp_path, {"a": "", "b": "", "c": ""})
    result = CliRunner().invoke(cli, ["run", str(suite_dir), "--list", "--order-by", "reverse"])
    assert result.exit_code == 0, result.output
    names = [Path(line).name for line in result.output.splitlines()]
    assert names == ["test_c.py", "test_b.py", "test_a.py"]


def test_cli_config_file_and_override(tmp_path: Path) -> None:
    suite_dir, command = _project(tmp_path, {"a": "x = 1\n", "b": "x = 1\n"})
    summary = tmp_path / "run.json"
    config = tmp_path / "partest.yaml"
    config.write_text(
        f"path: suite\nprocesses: 1\norder_by: random\nrandom_order_seed: 7\nlog_json: {summary.as_posix()}\n",
        encoding="utf-8",
    )
    result = CliRunner().invoke(
        cli, ["run", "--config", str(config), "-p", "2", "--command", command, "--no-colors"]
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(summary.read_text(encoding="utf-8"))
    assert payload["summary"]["processes"] == 2
    assert payload["summary"]["seed"] == 7
    assert payload["summary"]["total"] == 2


def test_cli_invalid_options_are_usage_errors(tmp_path: Path) -> None:
    suite_dir, _ = _project(tmp_path, {"a": ""})
    result = CliRunner().invoke(cli, ["run", str(suite_dir), "--random-order-seed", "3"])
    assert result.exit_code == 2
    assert "random" in result.output


def test_cli_missing_path_is_a_usage_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["run", str(tmp_path / "missing")])
    assert result.exit_code == 2
    assert "Test path not found" in result.output


def test_cli_empty_run_exits_zero(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    result = CliRunner().invoke(cli, ["run", str(empty), "--no-colors"])
    assert result.exit_code == 0, result.output
    assert "Running 0 suite(s)" in result.output


def test_main_returns_exit_code(tmp_path: Path) -> None:
    suite_dir, command = _project(tmp_path, {"a": "# FAIL\n"})
    assert main(["run", str(suite_dir), "--command", command, "--no-colors"]) == 1


def test_cli_list_matches_the_dispatch_queue_for_a_seed(tmp_path: Path) -> None:
    suite_dir, _ = _project(tmp_path, {name: "" for name in "abcdef"})
    result = CliRunner().invoke(
        cli, ["run", str(suite_dir), "--list", "--order-by", "random", "--random-order-seed", "9"]
    )
    assert result.exit_code == 0, result.output
    listed = [line for line in result.output.splitlines() if line.endswith(".py")]
    loader = SuiteLoader(suite_dir)
    expected = [unit.identifier() for unit in build_queue(loader.units(), "random", 9)]
    assert listed == expected
    assert "Random order seed: 9" in result.output
