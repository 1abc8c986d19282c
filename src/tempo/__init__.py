"""Tempo - day scheduling and reshuffle engine."""

__version__ = "0.1.0"
