"""JUnit XML log reading and consolidation."""
from .interpreter import LogInterpreter
from .reader import LogReader
from .writer import Writer

__all__ = ["LogInterpreter", "LogReader", "Writer"]
