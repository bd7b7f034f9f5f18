"""Tests for session statistics."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_measurement
from pitch_height_tracker.analysis.metrics import (
    QualityDistribution,
    SessionAggregator,
    compute_percentile,
    export_session_data,
    import_session_data,
    pitch_frequency,
    quality_distribution,
)
from pitch_height_tracker.core.exceptions import InvalidInputError
from pitch_height_tracker.core.types import Measurement


class TestSessionAggregator:
    """Tests for the SessionAggregator class."""

    def test_empty(self) -> None:
        aggregator = SessionAggregator()

        assert aggregator.count == 0
        assert aggregator.last_measurement is None
        assert aggregator.statistics().average is None

    def test_running_statistics(self, session_measurements: list[Measurement]) -> None:
        aggregator = SessionAggregator()
        for m in session_measurements:
            aggregator.add(m)

        stats = aggregator.statistics()

        assert stats.count == 4
        assert stats.average == pytest.approx(3.5)
        assert stats.min == 2.0
        assert stats.max == 5.0
        assert stats.avg_uncertainty == pytest.approx(0.5)
        assert aggregator.last_measurement == session_measurements[-1]

    def test_clear(self, session_measurements: list[Measurement]) -> None:
        aggregator = SessionAggregator(session_measurements)
        aggregator.clear()

        assert aggregator.count == 0
        assert aggregator.measurements == []


class TestSessionSummary:
    """Tests for descriptive session statistics."""

    def test_summary(self, session_measurements: list[Measurement]) -> None:
        summary = SessionAggregator(session_measurements).summary()

        assert summary.total_pitches == 4
        assert summary.min_height == 2.0
        assert summary.max_height == 5.0
        assert summary.avg_height == pytest.approx(3.5)
        assert summary.variance == pytest.approx(5.0 / 3.0)
        assert summary.std_dev == pytest.approx((5.0 / 3.0) ** 0.5)
        assert summary.median_height == pytest.approx(3.5)
        assert summary.percentile_25 == pytest.approx(2.75)
        assert summary.percentile_75 == pytest.approx(4.25)
        assert summary.quality == QualityDistribution(excellent=1, good=1, fair=1, poor=1)
        assert summary.pitches_per_minute == pytest.approx(4 / 3)

    def test_weighted_height(self, session_measurements: list[Measurement]) -> None:
        """Equal uncertainties weight evenly; uncertainty shrinks by sqrt(n)."""
        summary = SessionAggregator(session_measurements).summary()

        assert summary.weighted_height == pytest.approx(3.5)
        assert summary.weighted_uncertainty == pytest.approx(0.25)
        assert summary.confidence_interval_95 == pytest.approx((3.5 - 0.49, 3.5 + 0.49))

    def test_empty_summary(self) -> None:
        summary = SessionAggregator().summary()

        assert summary.total_pitches == 0
        assert summary.avg_height is None
        assert summary.median_height is None
        assert summary.confidence_interval_95 is None
        assert summary.pitches_per_minute == 0.0

    def test_single_pitch_has_zero_variance(self) -> None:
        summary = SessionAggregator([make_measurement(3.0)]).summary()

        assert summary.variance == 0.0
        assert summary.median_height == 3.0

    def test_zero_uncertainty_skips_weighting(self) -> None:
        summary = SessionAggregator([make_measurement(3.0, uncertainty_feet=0.0)]).summary()
        assert summary.weighted_height is None

    def test_height_distribution(self, session_measurements: list[Measurement]) -> None:
        bins = SessionAggregator(session_measurements).height_distribution(bin_count=2)

        assert [b.count for b in bins] == [2, 2]
        assert bins[0].bin_start == 2.0
        assert bins[-1].bin_end == pytest.approx(5.0)

    def test_height_distribution_empty(self) -> None:
        assert SessionAggregator().height_distribution() == []

    @pytest.mark.parametrize("bin_count", [0, -1])
    def test_height_distribution_rejects_bad_bin_count(
        self, session_measurements: list[Measurement], bin_count: int
    ) -> None:
        with pytest.raises(InvalidInputError, match="bin_count"):
            SessionAggregator(session_measurements).height_distribution(bin_count=bin_count)


class TestHelpers:
    """Tests for module-level statistics helpers."""

    def test_percentile_interpolates(self) -> None:
        assert compute_percentile([1.0, 2.0, 3.0, 4.0], 50) == pytest.approx(2.5)
        assert compute_percentile([1.0, 2.0, 3.0], 50) == 2.0

    def test_percentile_empty(self) -> None:
        assert compute_percentile([], 50) is None

    def test_quality_band_edges(self) -> None:
        scores = [90, 89, 70, 69, 50, 49]
        dist = quality_distribution(make_measurement(2.0, quality_score=s) for s in scores)

        assert dist == QualityDistribution(excellent=1, good=2, fair=2, poor=1)

    def test_frequency_needs_two_pitches(self) -> None:
        assert pitch_frequency([make_measurement(2.0)]) == 0.0

    def test_frequency_zero_span(self) -> None:
        assert pitch_frequency([make_measurement(2.0), make_measurement(3.0)]) == 0.0


class TestSessionExport:
    """Tests for JSON export and import."""

    def test_export_and_import(
        self, session_measurements: list[Measurement], tmp_path: Path
    ) -> None:
        path = tmp_path / "sessions" / "session.json"
        export_session_data(session_measurements, path)

        aggregator = import_session_data(path)

        assert aggregator.measurements == session_measurements
        assert aggregator.statistics().average == pytest.approx(3.5)

    def test_from_dict_coerces_calibration_timestamp(self) -> None:
        """Timestamps written by other tools as floats or strings load as int."""
        record = {
            "height_feet": 2.5,
            "uncertainty_feet": 0.2,
            "detection_confidence": 80,
            "quality_score": 70,
            "timestamp_millis": 1000,
        }

        as_float = Measurement.from_dict({**record, "calibration_created_at_millis": 5.0})
        as_text = Measurement.from_dict({**record, "calibration_created_at_millis": "5"})
        absent = Measurement.from_dict(record)

        assert as_float.calibration_created_at_millis == 5
        assert isinstance(as_float.calibration_created_at_millis, int)
        assert as_text.calibration_created_at_millis == 5
        assert absent.calibration_created_at_millis is None
