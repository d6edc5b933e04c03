"""Version information for partest."""

__version__ = "0.3.0"
