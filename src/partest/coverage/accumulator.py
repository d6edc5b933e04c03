"""Bounded incremental merge of per-unit coverage snapshots."""
from __future__ import annotations

from collections import deque
from typing import Deque

from .models import CoverageData


class CoverageAccumulator:
    """Folds coverage snapshots while retaining at most ``limit`` of them raw.

    Once more than ``limit`` raw snapshots are held, the oldest ones are
    compacted into the baseline. Merging is commutative, so the point at which
    compaction happens never changes :meth:`report`.
    """

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError(f"coverage snapshot limit must be >= 0 (got {limit})")
        self._limit = limit
        self._baseline = CoverageData()
        self._retained: Deque[CoverageData] = deque()
        self._folded = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def retained_count(self) -> int:
        return len(self._retained)

    @property
    def folded_count(self) -> int:
        return self._folded

    def fold(self, snapshot: CoverageData) -> None:
        self._retained.append(snapshot)
        self._folded += 1
        while len(self._retained) > self._limit:
            self.compact(1)

    def compact(self, count: int | None = None) -> None:
        """Merge the ``count`` oldest retained snapshots (all by default) into the baseline."""

        remaining = len(self._retained) if count is None else min(count, len(self._retained))
        for _ in range(remaining):
            self._baseline.merge(self._retained.popleft())

    def report(self) -> CoverageData:
        merged = self._baseline.copy()
        for snapshot in self._retained:
            merged.merge(snapshot)
        return merged
