"""Niche Communities forum service."""

__version__ = "0.1.0"
