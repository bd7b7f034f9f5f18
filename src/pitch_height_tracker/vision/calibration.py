"""Calibration system for pixel-to-feet conversion."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np

from pitch_height_tracker.analysis.uncertainty import calibration_quality_score
from pitch_height_tracker.core.config import CalibrationSettings
from pitch_height_tracker.core.exceptions import (
    CalibrationError,
    NoCalibrationError,
    NoMeasurementsError,
)
from pitch_height_tracker.core.logging import get_logger
from pitch_height_tracker.core.types import Calibration, CalibrationState, now_millis

logger = get_logger(__name__)


class CalibrationEngine:
    """Builds a pixels-per-foot calibration from a known reference height.

    The operator supplies the real-world height of a reference object and a
    series of its measured pixel heights. Finalizing the session freezes the
    samples into an immutable Calibration with a propagated uncertainty.

    States: IDLE -> COLLECTING -> FINALIZED; reset() returns to IDLE from
    any state.
    """

    def __init__(
        self,
        settings: CalibrationSettings | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize engine with settings.

        Args:
            settings: Calibration settings (uses defaults if None)
            clock: Returns the current time in epoch milliseconds
        """
        self.settings = settings or CalibrationSettings()
        self._clock = clock or now_millis
        self._state = CalibrationState.IDLE
        self._reference_height_feet: float | None = None
        self._samples: list[float] = []
        self._calibration: Calibration | None = None

    @property
    def state(self) -> CalibrationState:
        return self._state

    @property
    def samples(self) -> tuple[float, ...]:
        """Pixel heights collected in the current session."""
        return tuple(self._samples)

    @property
    def measurement_count(self) -> int:
        return len(self._samples)

    @property
    def current_calibration(self) -> Calibration | None:
        """Get the last finalized calibration."""
        return self._calibration

    @property
    def is_calibrated(self) -> bool:
        return self._calibration is not None

    def start_calibration(self, reference_height_feet: float) -> None:
        """Begin a new calibration session.

        Discards previously collected samples and any held calibration.
        The reference height is not validated here.

        Args:
            reference_height_feet: Known height of the reference object
        """
        self._reference_height_feet = reference_height_feet
        self._samples = []
        self._calibration = None
        self._state = CalibrationState.COLLECTING
        logger.info("Calibration started (reference: %.2f ft)", reference_height_feet)

    def add_measurement(self, pixel_height: float) -> None:
        """Record one measured pixel height of the reference object.

        Raises:
            CalibrationError: If no calibration session is collecting
        """
        if self._state is not CalibrationState.COLLECTING:
            raise CalibrationError("Calibration not started; call start_calibration first")

        self._samples.append(float(pixel_height))
        logger.debug("Calibration sample %d: %.1f px", len(self._samples), pixel_height)

    def finalize_calibration(self, reference_height_feet: float | None = None) -> Calibration:
        """Compute the calibration from the collected samples.

        Uses the population variance of the samples. The uncertainty is
        inflated by max(1, 5 / n) so that sessions with fewer than five
        samples are penalized; zero spread falls back to a 0.1 ft floor.

        Args:
            reference_height_feet: Known reference height (defaults to the
                value given to start_calibration)

        Returns:
            Immutable Calibration

        Raises:
            NoMeasurementsError: If no samples were collected
        """
        if not self._samples:
            raise NoMeasurementsError()

        if reference_height_feet is None:
            reference_height_feet = self._reference_height_feet
        if reference_height_feet is None:
            raise CalibrationError("No reference height supplied")

        samples = np.asarray(self._samples, dtype=np.float64)
        count = len(samples)

        mean_pixel_height = float(np.mean(samples))
        pixels_per_foot = mean_pixel_height / reference_height_feet

        std_dev = float(np.sqrt(np.var(samples)))
        uncertainty_factor = max(
            1.0, self.settings.full_confidence_measurements / count
        )
        if std_dev > 0:
            base_uncertainty = (std_dev / mean_pixel_height) * reference_height_feet
        else:
            base_uncertainty = self.settings.default_uncertainty_feet

        calibration = Calibration(
            reference_height_feet=reference_height_feet,
            mean_pixel_height=mean_pixel_height,
            pixels_per_foot=pixels_per_foot,
            uncertainty_feet=base_uncertainty * uncertainty_factor,
            measurement_count=count,
            created_at_millis=self._clock(),
        )

        self._reference_height_feet = reference_height_feet
        self._calibration = calibration
        self._state = CalibrationState.FINALIZED
        logger.info(
            "Calibration finalized: %.2f px/ft ± %.3f ft (%d samples)",
            calibration.pixels_per_foot,
            calibration.uncertainty_feet,
            count,
        )

        return calibration

    def get_calibration(self) -> Calibration | None:
        """Return the last finalized calibration, or None."""
        return self._calibration

    def is_valid(self, max_age_millis: int | None = None) -> bool:
        """Check that a calibration exists and is younger than max_age_millis.

        Args:
            max_age_millis: Maximum age (defaults to settings, one hour)
        """
        if self._calibration is None:
            return False

        if max_age_millis is None:
            max_age_millis = self.settings.max_age_millis

        return not self._calibration.is_expired(max_age_millis, self._clock())

    def is_calibration_valid(self, max_age_millis: int | None = None) -> bool:
        return self.is_valid(max_age_millis)

    def get_quality_score(self) -> int:
        """Calibration quality [0, 100]; 0 when not calibrated."""
        if self._calibration is None:
            return 0

        return calibration_quality_score(
            self._calibration.uncertainty_feet,
            self._calibration.measurement_count,
        )

    def pixels_to_feet(self, pixels: float) -> float:
        """Convert a pixel distance to feet with the current calibration.

        Raises:
            NoCalibrationError: If no calibration exists
        """
        if self._calibration is None:
            raise NoCalibrationError()

        return self._calibration.px_to_feet(pixels)

    def reset(self) -> None:
        """Discard samples and any held calibration."""
        self._state = CalibrationState.IDLE
        self._reference_height_feet = None
        self._samples = []
        self._calibration = None
        logger.debug("Calibration reset")

    def calibration_summary(self) -> dict[str, Any]:
        """Snapshot of the calibration for display."""
        calibration = self._calibration
        return {
            "calibrated": calibration is not None,
            "valid": self.is_valid(),
            "pixels_per_foot": calibration.pixels_per_foot if calibration else None,
            "uncertainty_feet": calibration.uncertainty_feet if calibration else None,
            "measurement_count": calibration.measurement_count if calibration else 0,
            "quality_score": self.get_quality_score(),
        }

    def save_calibration(self, path: Path) -> None:
        """Save current calibration to file.

        Args:
            path: Output file path (JSON)

        Raises:
            NoCalibrationError: If no calibration exists
        """
        if self._calibration is None:
            raise NoCalibrationError("No calibration to save")

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self._calibration.to_dict(), f, indent=2)

        logger.info("Saved calibration to %s", path)

    def load_calibration(self, path: Path) -> Calibration:
        """Load a calibration from file and make it current.

        Args:
            path: Input file path (JSON)

        Returns:
            Loaded Calibration

        Raises:
            CalibrationError: If file invalid or not found
        """
        try:
            with open(path) as f:
                data = json.load(f)
            calibration = Calibration.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise CalibrationError(f"Failed to load calibration: {e}") from e

        self._samples = []
        self._reference_height_feet = calibration.reference_height_feet
        self._calibration = calibration
        self._state = CalibrationState.FINALIZED
        logger.info("Loaded calibration from %s", path)

        return calibration
