"""Pytest fixtures for Pitch Height Tracker tests."""

from __future__ import annotations

import pytest

from pitch_height_tracker.core.config import CalibrationSettings, Settings
from pitch_height_tracker.core.types import BallDetection, Calibration, Measurement
from pitch_height_tracker.pipeline.processor import MeasurementPipeline
from pitch_height_tracker.vision.calibration import CalibrationEngine

START_MILLIS = 1_700_000_000_000


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, now: int = START_MILLIS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture
def clock() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """Create default application settings."""
    return Settings()


@pytest.fixture
def calibration_settings() -> CalibrationSettings:
    """Create calibration settings for testing."""
    return CalibrationSettings()


@pytest.fixture
def engine(calibration_settings: CalibrationSettings, clock: FakeClock) -> CalibrationEngine:
    """Create an uncalibrated engine driven by the fake clock."""
    return CalibrationEngine(calibration_settings, clock=clock)


@pytest.fixture
def calibrated_engine(engine: CalibrationEngine) -> CalibrationEngine:
    """Engine calibrated with one 200 px sample of a 4 ft reference (50 px/ft)."""
    engine.start_calibration(4.0)
    engine.add_measurement(200)
    engine.finalize_calibration(4.0)
    return engine


@pytest.fixture
def pipeline(
    calibrated_engine: CalibrationEngine, settings: Settings, clock: FakeClock
) -> MeasurementPipeline:
    """Create a tracking pipeline over the calibrated engine."""
    return MeasurementPipeline(calibrated_engine, settings, clock=clock)


@pytest.fixture
def good_detection() -> BallDetection:
    """A confident detection 100 px up the frame."""
    return BallDetection(detected=True, x=100.0, y=100.0, confidence=90, pixel_count=150)


@pytest.fixture
def calibration() -> Calibration:
    """Create a sample calibration."""
    return Calibration(
        reference_height_feet=4.0,
        mean_pixel_height=200.0,
        pixels_per_foot=50.0,
        uncertainty_feet=0.5,
        measurement_count=1,
        created_at_millis=START_MILLIS,
    )


def make_measurement(
    height_feet: float,
    uncertainty_feet: float = 0.5,
    quality_score: int = 80,
    timestamp_millis: int = START_MILLIS,
) -> Measurement:
    """Build a measurement with sensible defaults."""
    return Measurement(
        height_feet=height_feet,
        uncertainty_feet=uncertainty_feet,
        detection_confidence=90,
        quality_score=quality_score,
        timestamp_millis=timestamp_millis,
    )


@pytest.fixture
def session_measurements() -> list[Measurement]:
    """Four pitches one minute apart, one per quality band."""
    heights = [2.0, 3.0, 4.0, 5.0]
    scores = [95, 75, 55, 10]
    return [
        make_measurement(h, quality_score=q, timestamp_millis=START_MILLIS + i * 60_000)
        for i, (h, q) in enumerate(zip(heights, scores))
    ]
