"""Krill, a small terminal text editor."""

__version__ = "0.0.1"
