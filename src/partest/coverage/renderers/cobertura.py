"""Cobertura XML coverage output."""
from __future__ import annotations

import posixpath
from collections import defaultdict
from typing import Dict, List, Tuple
from xml.etree import ElementTree as ET

from partest import __version__
from partest.coverage.models import CoverageData, FileCoverage

from .base import CoverageRenderer, RenderOptions


def _rate(hit: int, found: int) -> str:
    return f"{(hit / found) if found else 1.0:.4f}"


class CoberturaRenderer(CoverageRenderer):
    name = "cobertura"
    default_filename = "cobertura.xml"

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        root = ET.Element(
            "coverage",
            {
                "line-rate": _rate(coverage.lines_hit, coverage.lines_found),
                "branch-rate": _rate(coverage.branches_hit, coverage.branches_found),
                "lines-covered": str(coverage.lines_hit),
                "lines-valid": str(coverage.lines_found),
                "branches-covered": str(coverage.branches_hit),
                "branches-valid": str(coverage.branches_found),
                "complexity": "0",
                "version": __version__,
                "timestamp": str(options.timestamp),
            },
        )
        sources = ET.SubElement(root, "sources")
        ET.SubElement(sources, "source").text = str(options.source_root or ".")
        packages = ET.SubElement(root, "packages")
        for package_name, files in _group_by_package(coverage):
            lines_hit = sum(f.lines_hit for f in files)
            lines_found = sum(f.lines_found for f in files)
            branches_hit = sum(f.branches_hit for f in files)
            branches_found = sum(f.branches_found for f in files)
            package = ET.SubElement(
                packages,
                "package",
                {
                    "name": package_name,
                    "line-rate": _rate(lines_hit, lines_found),
                    "branch-rate": _rate(branches_hit, branches_found),
                    "complexity": "0",
                },
            )
            classes = ET.SubElement(package, "classes")
            for file_cov in files:
                self._add_class(classes, file_cov)
        ET.indent(root)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n"

    def _add_class(self, parent: ET.Element, file_cov: FileCoverage) -> None:
        element = ET.SubElement(
            parent,
            "class",
            {
                "name": posixpath.basename(file_cov.path),
                "filename": file_cov.path,
                "line-rate": _rate(file_cov.lines_hit, file_cov.lines_found),
                "branch-rate": _rate(file_cov.branches_hit, file_cov.branches_found),
                "complexity": "0",
            },
        )
        ET.SubElement(element, "methods")
        lines = ET.SubElement(element, "lines")
        branches_by_line: Dict[int, List[int]] = defaultdict(list)
        for (line, _), hits in file_cov.branches.items():
            branches_by_line[line].append(hits)
        for number in sorted(file_cov.lines):
            attrs = {"number": str(number), "hits": str(file_cov.lines[number])}
            branch_hits = branches_by_line.get(number)
            if branch_hits:
                taken = sum(1 for hits in branch_hits if hits > 0)
                attrs["branch"] = "true"
                attrs["condition-coverage"] = (
                    f"{int(taken / len(branch_hits) * 100)}% ({taken}/{len(branch_hits)})"
                )
            else:
                attrs["branch"] = "false"
            ET.SubElement(lines, "line", attrs)


def _group_by_package(coverage: CoverageData) -> List[Tuple[str, List[FileCoverage]]]:
    packages: Dict[str, List[FileCoverage]] = defaultdict(list)
    for file_cov in coverage:
        directory = posixpath.dirname(file_cov.path.replace("\\", "/"))
        packages[directory.replace("/", ".") or "."].append(file_cov)
    return sorted(packages.items())
