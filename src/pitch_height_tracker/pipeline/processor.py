"""Per-frame measurement pipeline orchestration."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from pitch_height_tracker.analysis.metrics import SessionAggregator
from pitch_height_tracker.analysis.uncertainty import (
    measurement_noise,
    propagate_addition,
    round_half_up,
)
from pitch_height_tracker.analysis.validation import is_valid_height
from pitch_height_tracker.core.config import Settings, get_settings
from pitch_height_tracker.core.exceptions import CalibrationRequiredError
from pitch_height_tracker.core.logging import get_logger
from pitch_height_tracker.core.types import (
    BallDetection,
    Calibration,
    Measurement,
    TrackingStatistics,
    now_millis,
)
from pitch_height_tracker.vision.calibration import CalibrationEngine

logger = get_logger(__name__)


class MeasurementPipeline:
    """Turns ball detections into calibrated pitch height measurements.

    Coordinates:
    - Detection gating (tracking state, detected flag, minimum confidence)
    - Pixel-to-feet conversion through the calibration engine
    - Uncertainty propagation and quality scoring
    - Session result collection

    Calls must be serialized by the caller; the pipeline holds no locks.
    """

    def __init__(
        self,
        calibration_engine: CalibrationEngine,
        settings: Settings | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize pipeline with its calibration engine.

        Args:
            calibration_engine: Engine providing the active calibration
            settings: Application settings (uses defaults if None)
            clock: Returns the current time in epoch milliseconds
        """
        self.settings = settings or get_settings()
        self._engine = calibration_engine
        self._clock = clock or now_millis
        self._session = SessionAggregator()
        self._is_tracking = False

    @property
    def calibration_engine(self) -> CalibrationEngine:
        return self._engine

    @property
    def is_tracking(self) -> bool:
        """Check if a tracking session is active."""
        return self._is_tracking

    def is_actively_tracking(self) -> bool:
        return self._is_tracking

    @property
    def session(self) -> SessionAggregator:
        return self._session

    def start_tracking(self) -> None:
        """Start a tracking session, discarding previous results."""
        self._is_tracking = True
        self._session.clear()
        logger.info("Tracking started")

    def stop_tracking(self) -> None:
        """Stop tracking; results are retained."""
        self._is_tracking = False
        logger.info("Tracking stopped (%d measurements)", self._session.count)

    def process(self, detection: BallDetection) -> Measurement | None:
        """Process one frame's detection into a measurement.

        Rejected frames (not tracking, no ball, low confidence) return None.

        Args:
            detection: Ball detector output for the frame

        Returns:
            The recorded Measurement, or None if the frame was rejected

        Raises:
            CalibrationRequiredError: If no present, unexpired calibration exists
        """
        if not self._is_tracking:
            return None

        tracking = self.settings.tracking
        if not detection.detected or detection.confidence < tracking.min_confidence:
            logger.debug(
                "Detection rejected (detected=%s, confidence=%d)",
                detection.detected,
                detection.confidence,
            )
            return None

        calibration = self._engine.get_calibration()
        if calibration is None or not self._engine.is_valid(
            self.settings.calibration.max_age_millis
        ):
            raise CalibrationRequiredError()

        height = self._engine.pixels_to_feet(detection.y)

        measurement = Measurement(
            height_feet=height,
            uncertainty_feet=self._total_uncertainty(calibration, detection),
            detection_confidence=detection.confidence,
            quality_score=self._quality_score(detection),
            timestamp_millis=self._clock(),
            pixel_x=detection.x,
            pixel_y=detection.y,
            calibration_created_at_millis=calibration.created_at_millis,
        )

        if not is_valid_height(height):
            logger.warning("Implausible pitch height: %.2f ft (y=%.1f px)", height, detection.y)

        self._session.add(measurement)
        logger.debug(
            "Pitch measured: %.2f ± %.2f ft (quality %d)",
            measurement.height_feet,
            measurement.uncertainty_feet,
            measurement.quality_score,
        )

        return measurement

    def process_batch(self, detections: Iterable[BallDetection]) -> list[Measurement]:
        """Process a sequence of frames, skipping rejected ones."""
        measurements = []
        for detection in detections:
            measurement = self.process(detection)
            if measurement is not None:
                measurements.append(measurement)
        return measurements

    def _total_uncertainty(self, calibration: Calibration, detection: BallDetection) -> float:
        """Root-sum-of-squares of calibration, detection and jitter terms."""
        detection_noise = measurement_noise(calibration.pixels_per_foot, detection.confidence)
        return propagate_addition(
            calibration.uncertainty_feet,
            detection_noise,
            self.settings.tracking.tracking_jitter_feet,
        )

    def _quality_score(self, detection: BallDetection) -> int:
        """Blend detection confidence (40%), calibration quality (40%) and pixel count (20%)."""
        full_pixel_count = self.settings.tracking.full_pixel_count
        pixel_score = min(100.0, detection.pixel_count / full_pixel_count * 100)

        return round_half_up(
            detection.confidence * 0.4
            + self._engine.get_quality_score() * 0.4
            + pixel_score * 0.2
        )

    def get_results(self) -> list[Measurement]:
        """Snapshot copy of this session's measurements."""
        return self._session.measurements

    def get_statistics(self) -> TrackingStatistics:
        return self._session.statistics()

    def clear_results(self) -> None:
        """Clear results without changing tracking state."""
        self._session.clear()

    def reset(self) -> None:
        """Stop tracking and clear results."""
        self._is_tracking = False
        self._session.clear()
        logger.debug("Pipeline reset")

    def __enter__(self) -> MeasurementPipeline:
        """Context manager entry."""
        self.start_tracking()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.stop_tracking()
