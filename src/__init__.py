"""Docker Environment Monitor."""

__version__ = "1.1.0"
