"""Scrum board state core with debounced change notifications."""

__version__ = "0.1.0"
