"""Custom exceptions for Pitch Height Tracker."""


class PitchTrackerError(Exception):
    """Base exception for all Pitch Height Tracker errors."""

    pass


class CalibrationError(PitchTrackerError):
    """Calibration process failed or invalid calibration data."""

    def __init__(self, message: str = "Calibration failed") -> None:
        self.message = message
        super().__init__(self.message)


class NoMeasurementsError(CalibrationError):
    """Calibration was finalized before any reference sample was recorded."""

    def __init__(self, message: str = "No calibration measurements available") -> None:
        super().__init__(message)


class NoCalibrationError(CalibrationError):
    """A pixel conversion was requested before any calibration exists."""

    def __init__(self, message: str = "No calibration data available") -> None:
        super().__init__(message)


class CalibrationRequiredError(CalibrationError):
    """Tracking needs a present, unexpired calibration; recalibrate."""

    def __init__(self, message: str = "Valid calibration required for tracking") -> None:
        super().__init__(message)


class InvalidInputError(PitchTrackerError, ValueError):
    """Malformed arguments passed to a numeric routine."""

    def __init__(self, message: str = "Invalid input") -> None:
        self.message = message
        super().__init__(self.message)
