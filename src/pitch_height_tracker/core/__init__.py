"""Core infrastructure: config, types, exceptions, and logging."""

from pitch_height_tracker.core.config import Settings, get_settings
from pitch_height_tracker.core.exceptions import (
    CalibrationError,
    CalibrationRequiredError,
    InvalidInputError,
    NoCalibrationError,
    NoMeasurementsError,
    PitchTrackerError,
)
from pitch_height_tracker.core.logging import configure_logging, get_logger, setup_logging
from pitch_height_tracker.core.types import (
    BallDetection,
    Calibration,
    CalibrationState,
    Measurement,
    TrackingStatistics,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "BallDetection",
    "Calibration",
    "CalibrationState",
    "Measurement",
    "TrackingStatistics",
    # Exceptions
    "PitchTrackerError",
    "CalibrationError",
    "NoMeasurementsError",
    "NoCalibrationError",
    "CalibrationRequiredError",
    "InvalidInputError",
    # Logging
    "setup_logging",
    "configure_logging",
    "get_logger",
]
