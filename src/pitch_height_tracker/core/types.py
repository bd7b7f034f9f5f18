"""Core data types and structures."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from enum import Enum, auto
from typing import Any

from pitch_height_tracker.core.exceptions import InvalidInputError


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class CalibrationState(Enum):
    """States of the calibration session state machine."""

    IDLE = auto()
    COLLECTING = auto()
    FINALIZED = auto()


@dataclass(frozen=True, slots=True)
class BallDetection:
    """A single frame's output from the ball detector.

    Attributes:
        detected: Whether a ball-like region was found
        x: Ball centre X coordinate in pixels
        y: Ball centre Y coordinate in pixels
        confidence: Detection confidence [0, 100]
        pixel_count: Number of pixels matching the ball colour
    """

    detected: bool
    x: float
    y: float
    confidence: int
    pixel_count: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BallDetection:
        """Build a detection from a JSON-style mapping.

        Accepts both ``pixel_count`` and the detector's ``pixelCount`` key.

        Raises:
            InvalidInputError: If a field is missing or not numeric
        """
        try:
            pixel_count = data.get("pixel_count", data.get("pixelCount", 0))
            return cls(
                detected=bool(data["detected"]),
                x=float(data["x"]),
                y=float(data["y"]),
                confidence=int(data["confidence"]),
                pixel_count=int(pixel_count),
            )
        except KeyError as e:
            raise InvalidInputError(f"Detection record missing field {e}") from e
        except (AttributeError, TypeError, ValueError) as e:
            raise InvalidInputError(f"Malformed detection record: {e}") from e


@dataclass(frozen=True, slots=True)
class Calibration:
    """Finalized pixel-to-feet calibration.

    Created only by the calibration engine. A new calibration session
    produces a new instance; existing ones are never updated.

    Attributes:
        reference_height_feet: Known height of the reference object
        mean_pixel_height: Mean of the reference pixel-height samples
        pixels_per_foot: mean_pixel_height / reference_height_feet
        uncertainty_feet: Propagated scale uncertainty, in feet
        measurement_count: Number of samples used
        created_at_millis: Creation time (epoch ms), used for staleness
    """

    reference_height_feet: float
    mean_pixel_height: float
    pixels_per_foot: float
    uncertainty_feet: float
    measurement_count: int
    created_at_millis: int

    def px_to_feet(self, pixels: float) -> float:
        """Convert a pixel distance to feet."""
        return pixels / self.pixels_per_foot

    def feet_to_px(self, feet: float) -> float:
        """Convert feet to a pixel distance."""
        return feet * self.pixels_per_foot

    def age_millis(self, now: int) -> int:
        """Milliseconds elapsed since the calibration was created."""
        return now - self.created_at_millis

    def is_expired(self, max_age_millis: int, now: int) -> bool:
        """Whether the calibration is at least ``max_age_millis`` old."""
        return self.age_millis(now) >= max_age_millis

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Calibration:
        return cls(
            reference_height_feet=float(data["reference_height_feet"]),
            mean_pixel_height=float(data["mean_pixel_height"]),
            pixels_per_foot=float(data["pixels_per_foot"]),
            uncertainty_feet=float(data["uncertainty_feet"]),
            measurement_count=int(data["measurement_count"]),
            created_at_millis=int(data["created_at_millis"]),
        )


@dataclass(frozen=True, slots=True)
class Measurement:
    """A single pitch height reading.

    Calibration values are copied at process time, so replacing the
    calibration later does not affect measurements already produced.

    Attributes:
        height_feet: Ball height (detection Y / pixels per foot)
        uncertainty_feet: Combined calibration, detection and jitter error
        detection_confidence: Detector confidence [0, 100]
        quality_score: Blended measurement quality [0, 100]
        timestamp_millis: When the measurement was produced (epoch ms)
        pixel_x: Detection X coordinate in pixels
        pixel_y: Detection Y coordinate in pixels
        calibration_created_at_millis: Identifies the calibration used
    """

    height_feet: float
    uncertainty_feet: float
    detection_confidence: int
    quality_score: int
    timestamp_millis: int
    pixel_x: float = 0.0
    pixel_y: float = 0.0
    calibration_created_at_millis: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Measurement:
        created_at = data.get("calibration_created_at_millis")
        return cls(
            height_feet=float(data["height_feet"]),
            uncertainty_feet=float(data["uncertainty_feet"]),
            detection_confidence=int(data["detection_confidence"]),
            quality_score=int(data["quality_score"]),
            timestamp_millis=int(data["timestamp_millis"]),
            pixel_x=float(data.get("pixel_x", 0.0)),
            pixel_y=float(data.get("pixel_y", 0.0)),
            calibration_created_at_millis=int(created_at) if created_at is not None else None,
        )


@dataclass(frozen=True, slots=True)
class TrackingStatistics:
    """Running statistics over a tracking session's measurements.

    All value fields are None when no measurements have been recorded.
    """

    count: int
    average: float | None
    min: float | None
    max: float | None
    avg_uncertainty: float | None
