"""Unit discovery."""
from .suite_loader import SUITE_PATTERNS, SuiteLoader

__all__ = ["SUITE_PATTERNS", "SuiteLoader"]
