"""Exception hierarchy shared across partest subsystems."""
from __future__ import annotations


class PartestError(Exception):
    """Base class for all partest errors."""


class ConfigurationError(PartestError):
    """Invalid or contradictory options detected before any unit runs."""


class WorkerError(PartestError):
    """A single unit could not be launched by the worker pool."""


class ArtifactError(PartestError):
    """A per-unit log or coverage artifact is missing or corrupt."""


class ReportError(PartestError):
    """One report format could not be rendered or persisted."""


class CoordinatorError(PartestError):
    """Fatal coordinator failure; no further units can be dispatched."""
