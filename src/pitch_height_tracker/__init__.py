"""Pitch Height Tracker: calibrated pitch arc height measurement with uncertainty."""

__version__ = "0.1.0"
