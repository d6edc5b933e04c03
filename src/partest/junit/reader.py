"""Reader for the JUnit XML log a single unit leaves behind."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional
from xml.etree import ElementTree as ET

from partest.errors import ArtifactError


class LogReader:
    """Handle on one unit's JUnit XML log file."""

    def __init__(self, path: Path, unit_id: str = "") -> None:
        self.path = Path(path)
        self.unit_id = unit_id or self.path.stem
        self._suites: Optional[List[ET.Element]] = None
        self._removed = False

    @property
    def removed(self) -> bool:
        return self._removed

    def suites(self) -> List[ET.Element]:
        """Return the ``<testsuite>`` elements contained in the log."""

        if self._suites is None:
            self._suites = self._parse()
        return list(self._suites)

    def _parse(self) -> List[ET.Element]:
        if not self.path.exists():
            raise ArtifactError(f"Log for {self.unit_id} not found at {self.path}")
        try:
            root = ET.parse(self.path).getroot()
        except (ET.ParseError, OSError) as exc:
            raise ArtifactError(f"Log for {self.unit_id} is malformed: {exc}") from exc
        if root.tag == "testsuite":
            return [root]
        if root.tag == "testsuites":
            return [child for child in root if child.tag == "testsuite"]
        raise ArtifactError(f"Log for {self.unit_id} has unexpected root element <{root.tag}>")

    def remove_log(self) -> None:
        """Delete the backing log file; later calls are no-ops."""

        if self._removed:
            return
        self._removed = True
        self.path.unlink(missing_ok=True)
