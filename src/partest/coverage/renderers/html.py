"""Single-page HTML coverage summary."""
from __future__ import annotations

import html
from typing import Iterable, List

from partest.coverage.models import CoverageData, percent

from .base import CoverageRenderer, RenderOptions
from .text import HIGH_LOWER_BOUND, LOW_UPPER_BOUND

_STYLE = (
    "body{font-family:sans-serif;margin:2em}"
    "table{border-collapse:collapse}"
    "td,th{border:1px solid #ccc;padding:4px 8px;text-align:left}"
    ".low{background:#f2dede}.medium{background:#fcf8e3}.high{background:#dff0d8}"
)


class HtmlRenderer(CoverageRenderer):
    name = "html"
    default_filename = "index.html"

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        title = html.escape(f"Coverage for {options.name}")
        rows: List[str] = []
        for file_cov in coverage:
            ratio = percent(file_cov.lines_hit, file_cov.lines_found)
            rows.append(
                f'<tr class="{_level(ratio)}">'
                f"<td>{html.escape(file_cov.path)}</td>"
                f"<td>{file_cov.lines_hit}/{file_cov.lines_found}</td>"
                f"<td>{ratio:.2f}%</td>"
                f"<td>{file_cov.branches_hit}/{file_cov.branches_found}</td>"
                f"<td>{html.escape(_ranges(file_cov.missing_lines()))}</td>"
                "</tr>"
            )
        total = percent(coverage.lines_hit, coverage.lines_found)
        document = "\n".join(
            [
                "<!DOCTYPE html>",
                '<html lang="en">',
                f"<head><meta charset=\"utf-8\"><title>{title}</title><style>{_STYLE}</style></head>",
                "<body>",
                f"<h1>{title}</h1>",
                f"<p>Lines: {coverage.lines_hit}/{coverage.lines_found} ({total:.2f}%)</p>",
                "<table>",
                "<tr><th>File</th><th>Lines</th><th>Coverage</th><th>Branches</th><th>Missing</th></tr>",
                *rows,
                "</table>",
                "</body>",
                "</html>",
            ]
        )
        return (document + "\n").encode("utf-8")


def _level(ratio: float) -> str:
    if ratio < LOW_UPPER_BOUND:
        return "low"
    if ratio < HIGH_LOWER_BOUND:
        return "medium"
    return "high"


def _ranges(lines: Iterable[int]) -> str:
    """Collapse sorted line numbers into ``1-3, 7`` form."""

    spans: List[str] = []
    start = previous = None
    for line in lines:
        if start is None:
            start = previous = line
            continue
        if line == previous + 1:
            previous = line
            continue
        spans.append(f"{start}-{previous}" if start != previous else str(start))
        start = previous = line
    if start is not None:
        spans.append(f"{start}-{previous}" if start != previous else str(start))
    return ", ".join(spans)
