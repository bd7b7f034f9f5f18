"""Pixel-space calibration against a known reference height."""

from pitch_height_tracker.vision.calibration import CalibrationEngine

__all__ = ["CalibrationEngine"]
