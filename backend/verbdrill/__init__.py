"""Adaptive verb and vocabulary drilling backend."""

__version__ = "0.1.0"
