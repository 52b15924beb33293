"""Publish npm workspace packages under a renamed scope."""

__version__ = "0.1.0"
