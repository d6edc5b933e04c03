"""Collects unit log readers and reads them back at finalization."""
from __future__ import annotations

from typing import Callable, List, Optional, Tuple
from xml.etree import ElementTree as ET

from partest.errors import ArtifactError

from .reader import LogReader

WarningHandler = Callable[[str], None]


class LogInterpreter:
    """Owns the log readers for every unit that reported through a log."""

    def __init__(self) -> None:
        self._readers: List[LogReader] = []

    def add_reader(self, reader: LogReader) -> None:
        self._readers.append(reader)

    def readers(self) -> List[LogReader]:
        """Readers in a stable order, independent of completion order."""

        return sorted(self._readers, key=lambda reader: reader.unit_id)

    def read_suites(self, on_warning: Optional[WarningHandler] = None) -> Tuple[List[ET.Element], int]:
        """Return all readable suites and the number of logs that had to be skipped."""

        suites: List[ET.Element] = []
        skipped = 0
        for reader in self.readers():
            try:
                suites.extend(reader.suites())
            except ArtifactError as exc:
                skipped += 1
                if on_warning:
                    on_warning(str(exc))
        return suites, skipped

    def remove_logs(self) -> int:
        removed = 0
        for reader in self._readers:
            if not reader.removed:
                reader.remove_log()
                removed += 1
        return removed
