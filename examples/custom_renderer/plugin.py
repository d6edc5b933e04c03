"""Registers a one-line coverage summary as the ``text`` format.

Usage: PARTEST_PLUGINS=plugin partest run tests --coverage-text
(with this directory on PYTHONPATH).
"""
from partest.coverage.models import CoverageData, percent
from partest.coverage.renderers import CoverageRenderer, RenderOptions, renderer_registry


class OneLineRenderer(CoverageRenderer):
    name = "text"
    default_filename = "coverage.txt"

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        covered = percent(coverage.lines_hit, coverage.lines_found)
        return f"{options.name}: {covered:.1f}% of {coverage.lines_found} lines\n".encode("utf-8")


def register() -> None:
    renderer_registry.update_or_register(OneLineRenderer())
