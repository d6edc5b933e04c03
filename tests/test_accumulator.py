from __future__ import annotations

import itertools

import pytest

from partest.coverage import CoverageAccumulator, CoverageData


def _snapshots() -> list[CoverageData]:
    return [
        CoverageData.from_lines({"pkg/a.py": {1: 1, 2: 0, 3: 2}}),
        CoverageData.from_lines({"pkg/a.py": {2: 1, 4: 0}, "pkg/b.py": {10: 1}}),
        CoverageData.from_lines({"pkg/b.py": {10: 3, 11: 0}, "pkg/c.py": {5: True}}),
    ]


def _fold_all(snapshots, limit: int, compact_every: int = 0) -> CoverageData:
    accumulator = CoverageAccumulator(limit)
    for index, snapshot in enumerate(snapshots, start=1):
        accumulator.fold(snapshot.copy())
        if compact_every and index % compact_every == 0:
            accumulator.compact()
    return accumulator.report()


def test_merge_is_order_independent() -> None:
    expected = _fold_all(_snapshots(), limit=10)
    for permutation in itertools.permutations(_snapshots()):
        assert _fold_all(permutation, limit=10) == expected


@pytest.mark.parametrize("limit", [0, 1, 2, 3])
@pytest.mark.parametrize("compact_every", [0, 1, 2])
def test_compaction_does_not_change_the_result(limit: int, compact_every: int) -> None:
    expected = _fold_all(_snapshots(), limit=10)
    assert _fold_all(_snapshots(), limit=limit, compact_every=compact_every) == expected


def test_merge_sums_counts_and_unions_executed_lines() -> None:
    merged = _fold_all(_snapshots(), limit=1)
    a = merged.files["pkg/a.py"]
    assert a.lines == {1: 1, 2: 1, 3: 2, 4: 0}
    assert a.executed_lines() == (1, 2, 3)
    assert a.missing_lines() == (4,)
    assert merged.files["pkg/b.py"].lines == {10: 4, 11: 0}
    assert merged.files["pkg/c.py"].lines == {5: 1}


def test_retained_snapshots_never_exceed_limit() -> None:
    accumulator = CoverageAccumulator(3)
    for index in range(20):
        accumulator.fold(CoverageData.from_lines({f"m{index % 4}.py": {index: 1}}))
        assert accumulator.retained_count <= 3
    assert accumulator.folded_count == 20
    assert accumulator.report().lines_hit == 20


def test_report_does_not_mutate_state() -> None:
    accumulator = CoverageAccumulator(1)
    for snapshot in _snapshots():
        accumulator.fold(snapshot)
    first = accumulator.report()
    first.file("pkg/a.py").record_line(99, 5)
    assert 99 not in accumulator.report().files["pkg/a.py"].lines


def test_branches_merge_like_lines() -> None:
    left = CoverageData()
    left.file("x.py").record_branch(3, 0, 1)
    left.file("x.py").record_branch(3, 1, 0)
    right = CoverageData()
    right.file("x.py").record_branch(3, 1, True)
    merged = _fold_all([left, right], limit=0)
    assert merged.files["x.py"].branches == {(3, 0): 1, (3, 1): 1}
    assert merged.branches_hit == 2


def test_negative_limit_is_rejected() -> None:
    with pytest.raises(ValueError):
        CoverageAccumulator(-1)
