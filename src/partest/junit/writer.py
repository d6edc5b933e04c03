"""Consolidates unit logs into one JUnit XML report."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Sequence
from xml.etree import ElementTree as ET

from .interpreter import LogInterpreter, WarningHandler

_COUNTERS = ("tests", "failures", "errors", "skipped")


class Writer:
    def __init__(self, interpreter: LogInterpreter, name: str = "") -> None:
        self._interpreter = interpreter
        self._name = name

    def build(self, on_warning: Optional[WarningHandler] = None) -> ET.Element:
        suites, _ = self._interpreter.read_suites(on_warning)
        totals = _totals(suites)
        root = ET.Element(
            "testsuites",
            {
                "name": self._name,
                **{key: str(totals[key]) for key in _COUNTERS},
                "time": f"{totals['time']:.6f}",
            },
        )
        root.extend(suites)
        return root

    def write(self, path: Path | str, on_warning: Optional[WarningHandler] = None) -> Path:
        target = Path(path)
        root = self.build(on_warning)
        ET.indent(root)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n")
        return target


def _totals(suites: Sequence[ET.Element]) -> Dict[str, float]:
    totals: Dict[str, float] = {key: 0 for key in _COUNTERS}
    totals["time"] = 0.0
    for suite in suites:
        for key in _COUNTERS:
            totals[key] += int(suite.get(key, "0") or 0)
        totals["time"] += float(suite.get("time", "0") or 0)
    return {key: (int(value) if key in _COUNTERS else value) for key, value in totals.items()}
