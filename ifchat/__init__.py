"""Chat-style front end for a suspend/resume interactive fiction engine."""

__version__ = "0.1.0"
