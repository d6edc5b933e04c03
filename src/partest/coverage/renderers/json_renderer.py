"""JSON coverage output in the native snapshot shape plus totals."""
from __future__ import annotations

import json

from partest.coverage.models import CoverageData, percent

from .base import CoverageRenderer, RenderOptions


class JsonRenderer(CoverageRenderer):
    name = "json"
    default_filename = "coverage.json"

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        payload = {
            "meta": {"name": options.name, "timestamp": options.timestamp},
            "totals": {
                "lines_found": coverage.lines_found,
                "lines_hit": coverage.lines_hit,
                "branches_found": coverage.branches_found,
                "branches_hit": coverage.branches_hit,
                "percent_covered": round(percent(coverage.lines_hit, coverage.lines_found), 2),
            },
            "files": coverage.as_dict(),
        }
        return (json.dumps(payload, indent=2) + "\n").encode("utf-8")
