from __future__ import annotations

import json
from pathlib import Path

import pytest

from partest.coverage import load_snapshot, parse_snapshot
from partest.errors import ArtifactError


def test_native_snapshot_shape(tmp_path: Path) -> None:
    path = tmp_path / "snap.json"
    path.write_text(
        json.dumps({"files": {"src/app.py": {"lines": {"1": 2, "2": 0}, "branches": {"1:0": 1, "1:-1": 0}}}}),
        encoding="utf-8",
    )
    data = load_snapshot(path)
    app = data.files["src/app.py"]
    assert app.lines == {1: 2, 2: 0}
    assert app.branches == {(1, 0): 1, (1, -1): 0}


def test_coverage_py_json_shape() -> None:
    raw = {
        "meta": {"version": "7.4.0"},
        "files": {
            "src/app.py": {
                "executed_lines": [1, 2, 5],
                "missing_lines": [7],
                "executed_branches": [[2, 5]],
                "missing_branches": [[2, 7]],
                "summary": {"covered_lines": 3},
            }
        },
        "totals": {"covered_lines": 3},
    }
    data = parse_snapshot(raw)
    app = data.files["src/app.py"]
    assert app.executed_lines() == (1, 2, 5)
    assert app.missing_lines() == (7,)
    assert app.branches == {(2, 5): 1, (2, 7): 0}


def test_missing_snapshot_raises_artifact_error(tmp_path: Path) -> None:
    with pytest.raises(ArtifactError, match="not found"):
        load_snapshot(tmp_path / "absent.json")


def test_corrupt_snapshot_raises_artifact_error(tmp_path: Path) -> None:
    path = tmp_path / "snap.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ArtifactError, match="unreadable"):
        load_snapshot(path)


def test_snapshot_failing_validation_reports_location() -> None:
    with pytest.raises(ArtifactError) as excinfo:
        parse_snapshot({"files": {"a.py": {"lines": {"one": 1}}}})
    assert "files/a.py/lines" in str(excinfo.value)
    with pytest.raises(ArtifactError):
        parse_snapshot({"lines": {}})
