"""Periodic speed-test logger."""

__version__ = "0.1.0"
