"""countdown: a terminal countdown timer."""

__version__ = "0.1.0"
