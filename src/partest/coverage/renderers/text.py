"""Plain-text coverage summary, optionally coloured."""
from __future__ import annotations

from typing import List

from colorama import Fore, Style

from partest.coverage.models import CoverageData, percent

from .base import CoverageRenderer, RenderOptions

LOW_UPPER_BOUND = 50.0
HIGH_LOWER_BOUND = 90.0


class TextRenderer(CoverageRenderer):
    name = "text"
    default_filename = "coverage.txt"

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        lines: List[str] = ["", "Code Coverage Report:", ""]
        lines.append(" Summary:")
        lines.append(
            self._row("  Lines:    ", coverage.lines_hit, coverage.lines_found, options.colors)
        )
        if coverage.branches_found:
            lines.append(
                self._row("  Branches: ", coverage.branches_hit, coverage.branches_found, options.colors)
            )
        lines.append("")
        for file_cov in coverage:
            lines.append(file_cov.path)
            lines.append(self._row("  Lines:    ", file_cov.lines_hit, file_cov.lines_found, options.colors))
            if file_cov.branches_found:
                lines.append(
                    self._row("  Branches: ", file_cov.branches_hit, file_cov.branches_found, options.colors)
                )
        return ("\n".join(lines) + "\n").encode("utf-8")

    def _row(self, label: str, hit: int, found: int, use_color: bool) -> str:
        ratio = percent(hit, found)
        text = f"{label}{ratio:6.2f}% ({hit}/{found})"
        if not use_color:
            return text
        return f"{_color_for(ratio)}{text}{Style.RESET_ALL}"


def _color_for(ratio: float) -> str:
    if ratio < LOW_UPPER_BOUND:
        return Fore.RED
    if ratio < HIGH_LOWER_BOUND:
        return Fore.YELLOW
    return Fore.GREEN
