"""Arcanium real-estate and mortgage marketplace demo."""

__version__ = "0.1.0"
