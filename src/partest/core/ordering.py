"""Ordering policies applied to the pending queue."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np

from partest.errors import ConfigurationError

from .models import ExecutableUnit

ORDER_DEFAULT = "default"
ORDER_RANDOM = "random"
ORDER_REVERSE = "reverse"

ORDER_POLICIES = (ORDER_DEFAULT, ORDER_RANDOM, ORDER_REVERSE)

MAX_SEED = 2**31


def order_units(
    units: Sequence[ExecutableUnit],
    order_by: str = ORDER_DEFAULT,
    seed: Optional[int] = None,
) -> List[ExecutableUnit]:
    """Arrange discovered units into the pending queue.

    ``random`` is a seeded permutation: the same seed and the same input
    always yield the same order. Callers resolve a missing seed with
    :func:`resolve_seed` first; ``None`` here falls back to ``0``.
    """

    pending = list(units)
    if order_by == ORDER_DEFAULT:
        return pending
    if order_by == ORDER_REVERSE:
        pending.reverse()
        return pending
    if order_by == ORDER_RANDOM:
        rng = np.random.default_rng(seed if seed is not None else 0)
        permutation = rng.permutation(len(pending))
        return [pending[int(index)] for index in permutation]
    supported = ", ".join(ORDER_POLICIES)
    raise ConfigurationError(f"Unknown order policy '{order_by}'. Supported: {supported}")


def resolve_seed(order_by: str, seed: Optional[int]) -> Optional[int]:
    """Seed to use for this run: the configured one, or a fresh draw for ``random``."""

    if order_by != ORDER_RANDOM or seed is not None:
        return seed
    return int(np.random.default_rng().integers(0, MAX_SEED))


def build_queue(
    units: Sequence[ExecutableUnit],
    order_by: str = ORDER_DEFAULT,
    seed: Optional[int] = None,
) -> List[ExecutableUnit]:
    """Drop duplicate units (first occurrence wins), then order the rest."""

    seen: Dict[str, ExecutableUnit] = {}
    for unit in units:
        seen.setdefault(unit.identifier(), unit)
    return order_units(list(seen.values()), order_by, seed)
