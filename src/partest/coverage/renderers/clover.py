"""Clover XML coverage output."""
from __future__ import annotations

from typing import Dict
from xml.etree import ElementTree as ET

from partest.coverage.models import CoverageData, FileCoverage

from .base import CoverageRenderer, RenderOptions


def _metrics(
    lines_found: int, lines_hit: int, branches_found: int, branches_hit: int, files: int | None = None
) -> Dict[str, str]:
    metrics = {
        "statements": str(lines_found),
        "coveredstatements": str(lines_hit),
        "conditionals": str(branches_found),
        "coveredconditionals": str(branches_hit),
        "methods": "0",
        "coveredmethods": "0",
        "elements": str(lines_found + branches_found),
        "coveredelements": str(lines_hit + branches_hit),
    }
    if files is not None:
        metrics["files"] = str(files)
    return metrics


class CloverRenderer(CoverageRenderer):
    name = "clover"
    default_filename = "clover.xml"

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        root = ET.Element("coverage", {"generated": str(options.timestamp), "clover": "4.4.1"})
        project = ET.SubElement(root, "project", {"timestamp": str(options.timestamp), "name": options.name})
        for file_cov in coverage:
            self._add_file(project, file_cov)
        ET.SubElement(
            project,
            "metrics",
            _metrics(
                coverage.lines_found,
                coverage.lines_hit,
                coverage.branches_found,
                coverage.branches_hit,
                files=len(coverage),
            ),
        )
        ET.indent(root)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n"

    def _add_file(self, project: ET.Element, file_cov: FileCoverage) -> None:
        element = ET.SubElement(project, "file", {"name": file_cov.path, "path": file_cov.path})
        branch_lines: Dict[int, tuple[int, int]] = {}
        for (line, _), hits in file_cov.branches.items():
            taken, total = branch_lines.get(line, (0, 0))
            branch_lines[line] = (taken + (1 if hits > 0 else 0), total + 1)
        for number in sorted(file_cov.lines):
            attrs = {"num": str(number), "count": str(file_cov.lines[number])}
            if number in branch_lines:
                taken, total = branch_lines[number]
                attrs.update({"type": "cond", "truecount": str(taken), "falsecount": str(total - taken)})
            else:
                attrs["type"] = "stmt"
            ET.SubElement(element, "line", attrs)
        ET.SubElement(
            element,
            "metrics",
            _metrics(file_cov.lines_found, file_cov.lines_hit, file_cov.branches_found, file_cov.branches_hit),
        )
