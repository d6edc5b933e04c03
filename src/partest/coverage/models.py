"""Line and branch coverage structures with a commutative merge."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, Tuple, Union

BranchKey = Tuple[int, int]  # (line number, branch id)
HitValue = Union[int, bool]


def _as_count(value: HitValue) -> int:
    if isinstance(value, bool):
        return 1 if value else 0
    count = int(value)
    if count < 0:
        raise ValueError(f"Hit counts cannot be negative (got {count})")
    return count


@dataclass
class FileCoverage:
    """Hit counts for the executable lines and branches of one source file."""

    path: str
    lines: Dict[int, int] = field(default_factory=dict)
    branches: Dict[BranchKey, int] = field(default_factory=dict)

    def record_line(self, line: int, hits: HitValue = 1) -> None:
        self.lines[int(line)] = self.lines.get(int(line), 0) + _as_count(hits)

    def record_branch(self, line: int, branch: int, hits: HitValue = 1) -> None:
        key = (int(line), int(branch))
        self.branches[key] = self.branches.get(key, 0) + _as_count(hits)

    def merge(self, other: "FileCoverage") -> None:
        for line, hits in other.lines.items():
            self.lines[line] = self.lines.get(line, 0) + hits
        for key, hits in other.branches.items():
            self.branches[key] = self.branches.get(key, 0) + hits

    def copy(self) -> "FileCoverage":
        return FileCoverage(path=self.path, lines=dict(self.lines), branches=dict(self.branches))

    @property
    def lines_found(self) -> int:
        return len(self.lines)

    @property
    def lines_hit(self) -> int:
        return sum(1 for hits in self.lines.values() if hits > 0)

    @property
    def branches_found(self) -> int:
        return len(self.branches)

    @property
    def branches_hit(self) -> int:
        return sum(1 for hits in self.branches.values() if hits > 0)

    def executed_lines(self) -> Tuple[int, ...]:
        return tuple(line for line in sorted(self.lines) if self.lines[line] > 0)

    def missing_lines(self) -> Tuple[int, ...]:
        return tuple(line for line in sorted(self.lines) if self.lines[line] == 0)


@dataclass
class CoverageData:
    """Coverage for a set of files, keyed by source path.

    Merging sums hit counts per location, so it is associative and
    commutative: any folding order gives the same result.
    """

    files: Dict[str, FileCoverage] = field(default_factory=dict)

    def file(self, path: str) -> FileCoverage:
        entry = self.files.get(path)
        if entry is None:
            entry = FileCoverage(path=path)
            self.files[path] = entry
        return entry

    def merge(self, other: "CoverageData") -> "CoverageData":
        for path, coverage in other.files.items():
            self.file(path).merge(coverage)
        return self

    def copy(self) -> "CoverageData":
        return CoverageData(files={path: cov.copy() for path, cov in self.files.items()})

    def __iter__(self) -> Iterator[FileCoverage]:
        for path in sorted(self.files):
            yield self.files[path]

    def __len__(self) -> int:
        return len(self.files)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CoverageData):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    @property
    def lines_found(self) -> int:
        return sum(cov.lines_found for cov in self.files.values())

    @property
    def lines_hit(self) -> int:
        return sum(cov.lines_hit for cov in self.files.values())

    @property
    def branches_found(self) -> int:
        return sum(cov.branches_found for cov in self.files.values())

    @property
    def branches_hit(self) -> int:
        return sum(cov.branches_hit for cov in self.files.values())

    def as_dict(self) -> Dict[str, Dict[str, Dict[str, int]]]:
        """Native JSON shape, sorted for stable output."""

        return {
            cov.path: {
                "lines": {str(line): cov.lines[line] for line in sorted(cov.lines)},
                "branches": {f"{line}:{branch}": cov.branches[(line, branch)] for line, branch in sorted(cov.branches)},
            }
            for cov in self
        }

    @classmethod
    def from_lines(cls, mapping: Mapping[str, Mapping[int, HitValue]]) -> "CoverageData":
        data = cls()
        for path, lines in mapping.items():
            entry = data.file(path)
            for line, hits in lines.items():
                entry.record_line(line, hits)
        return data


def percent(hit: int, found: int) -> float:
    if found == 0:
        return 100.0
    return hit / found * 100
