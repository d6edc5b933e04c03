"""Coverage accumulation, snapshot loading and rendering."""
from .accumulator import CoverageAccumulator
from .models import CoverageData, FileCoverage
from .snapshot import load_snapshot, parse_snapshot

__all__ = [
    "CoverageAccumulator",
    "CoverageData",
    "FileCoverage",
    "load_snapshot",
    "parse_snapshot",
]
