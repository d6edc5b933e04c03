"""Worker pools executing units out of process."""
from .base import WorkerHandle, WorkerPool
from .process import DEFAULT_COMMAND, DEFAULT_COVERAGE_ARGS, ProcessWorkerPool, build_tokens, render_template

__all__ = [
    "DEFAULT_COMMAND",
    "DEFAULT_COVERAGE_ARGS",
    "ProcessWorkerPool",
    "WorkerHandle",
    "WorkerPool",
    "build_tokens",
    "render_template",
]
