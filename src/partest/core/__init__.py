"""Core models and ordering exposed at the package level."""
from .models import (
    EXIT_ERROR,
    EXIT_FAILURE,
    EXIT_FATAL,
    EXIT_NO_RESULT,
    EXIT_SUCCESS,
    ExecutableUnit,
    RunResult,
    RunState,
)
from .ordering import (
    ORDER_DEFAULT,
    ORDER_POLICIES,
    ORDER_RANDOM,
    ORDER_REVERSE,
    build_queue,
    order_units,
    resolve_seed,
)

__all__ = [
    "EXIT_ERROR",
    "EXIT_FAILURE",
    "EXIT_FATAL",
    "EXIT_NO_RESULT",
    "EXIT_SUCCESS",
    "ExecutableUnit",
    "ORDER_DEFAULT",
    "ORDER_POLICIES",
    "ORDER_RANDOM",
    "ORDER_REVERSE",
    "RunResult",
    "RunState",
    "build_queue",
    "order_units",
    "resolve_seed",
]
