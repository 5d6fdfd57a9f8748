"""Parley: streaming structured-response chat assistant."""

__version__ = "0.1.0"
