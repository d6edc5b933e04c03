from __future__ import annotations

import json
from pathlib import Path
from xml.etree import ElementTree as ET

import pytest

from partest.coverage import CoverageData
from partest.coverage.renderers import ConsoleSink, FileSink, RenderOptions, renderer_registry, sink_for

OPTIONS = RenderOptions(colors=False, name="demo", timestamp=1700000000)


def _coverage() -> CoverageData:
    data = CoverageData.from_lines(
        {
            "pkg/core.py": {1: 3, 2: 0, 3: 1, 4: 0},
            "pkg/sub/util.py": {10: 1},
        }
    )
    data.file("pkg/core.py").record_branch(3, 0, 1)
    data.file("pkg/core.py").record_branch(3, 1, 0)
    return data


def _render(fmt: str, options: RenderOptions = OPTIONS) -> bytes:
    return renderer_registry.get(fmt).render(_coverage(), options)


def test_builtin_formats_are_registered() -> None:
    assert set(renderer_registry.names()) >= {"text", "json", "cobertura", "clover", "lcov", "html"}
    with pytest.raises(KeyError):
        renderer_registry.get("crap4j")


def test_text_summary() -> None:
    text = _render("text").decode("utf-8")
    assert "Code Coverage Report:" in text
    assert "Lines:     60.00% (3/5)" in text
    assert "Branches:  50.00% (1/2)" in text
    assert text.index("pkg/core.py") < text.index("pkg/sub/util.py")
    assert "\x1b[" not in text


def test_text_summary_colors() -> None:
    text = _render("text", RenderOptions(colors=True)).decode("utf-8")
    assert "\x1b[" in text


def test_json_report() -> None:
    payload = json.loads(_render("json"))
    assert payload["totals"]["lines_hit"] == 3
    assert payload["totals"]["lines_found"] == 5
    assert payload["files"]["pkg/core.py"]["lines"] == {"1": 3, "2": 0, "3": 1, "4": 0}
    assert payload["files"]["pkg/core.py"]["branches"] == {"3:0": 1, "3:1": 0}


def test_cobertura_report() -> None:
    root = ET.fromstring(_render("cobertura"))
    assert root.get("lines-valid") == "5"
    assert root.get("lines-covered") == "3"
    assert root.get("timestamp") == "1700000000"
    packages = [package.get("name") for package in root.iter("package")]
    assert packages == ["pkg", "pkg.sub"]
    branch_line = root.find(".//class[@filename='pkg/core.py']/lines/line[@number='3']")
    assert branch_line.get("branch") == "true"
    assert branch_line.get("condition-coverage") == "50% (1/2)"


def test_clover_report() -> None:
    root = ET.fromstring(_render("clover"))
    project = root.find("project")
    metrics = project.find("metrics")
    assert metrics.get("statements") == "5"
    assert metrics.get("coveredstatements") == "3"
    assert metrics.get("files") == "2"
    cond = project.find("file[@name='pkg/core.py']/line[@num='3']")
    assert cond.get("type") == "cond"
    assert cond.get("truecount") == "1"


def test_lcov_report() -> None:
    lines = _render("lcov").decode("utf-8").splitlines()
    assert lines[0] == "TN:demo"
    assert "SF:pkg/core.py" in lines
    assert "DA:2,0" in lines
    assert "BRDA:3,0,1,-" in lines
    assert "LH:2" in lines
    assert lines.count("end_of_record") == 2


def test_html_report_lists_missing_ranges() -> None:
    page = _render("html").decode("utf-8")
    assert "<title>Coverage for demo</title>" in page
    assert "pkg/core.py" in page
    assert "<td>2, 4</td>" in page


def test_empty_coverage_renders_everywhere() -> None:
    for fmt in renderer_registry.names():
        assert renderer_registry.get(fmt).render(CoverageData(), OPTIONS)


def test_sinks(tmp_path: Path, capsys) -> None:
    html = renderer_registry.get("html")
    directory_sink = sink_for(str(tmp_path / "html"), html)
    assert isinstance(directory_sink, FileSink)
    directory_sink.write(b"<html/>")
    assert (tmp_path / "html" / "index.html").read_bytes() == b"<html/>"
    file_sink = sink_for(str(tmp_path / "cov.txt"), renderer_registry.get("text"))
    file_sink.write(b"abc")
    assert (tmp_path / "cov.txt").read_text() == "abc"
    console = sink_for("", renderer_registry.get("text"))
    assert isinstance(console, ConsoleSink)
    console.write(b"printed\n")
    assert capsys.readouterr().out == "printed\n"
