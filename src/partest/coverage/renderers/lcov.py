"""LCOV tracefile output."""
from __future__ import annotations

from typing import List

from partest.coverage.models import CoverageData

from .base import CoverageRenderer, RenderOptions


class LcovRenderer(CoverageRenderer):
    name = "lcov"
    default_filename = "coverage.lcov"

    def render(self, coverage: CoverageData, options: RenderOptions) -> bytes:
        records: List[str] = [f"TN:{options.name}"]
        for file_cov in coverage:
            records.append(f"SF:{file_cov.path}")
            for (line, branch), hits in sorted(file_cov.branches.items()):
                taken = str(hits) if hits else "-"
                records.append(f"BRDA:{line},0,{branch},{taken}")
            if file_cov.branches:
                records.append(f"BRF:{file_cov.branches_found}")
                records.append(f"BRH:{file_cov.branches_hit}")
            for line in sorted(file_cov.lines):
                records.append(f"DA:{line},{file_cov.lines[line]}")
            records.append(f"LF:{file_cov.lines_found}")
            records.append(f"LH:{file_cov.lines_hit}")
            records.append("end_of_record")
        return ("\n".join(records) + "\n").encode("utf-8")
