"""Session statistics and metrics tracking.

This module is pure logic; the only I/O is the explicit JSON
export/import helpers at the bottom.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from pitch_height_tracker.analysis.uncertainty import confidence_interval, weighted_average
from pitch_height_tracker.core.exceptions import InvalidInputError
from pitch_height_tracker.core.types import Measurement, TrackingStatistics


@dataclass(frozen=True)
class QualityDistribution:
    """Pitch counts per quality band."""

    excellent: int  # 90-100
    good: int  # 70-89
    fair: int  # 50-69
    poor: int  # 0-49


@dataclass(frozen=True)
class HeightBin:
    """One histogram bin of pitch heights, in feet."""

    bin_start: float
    bin_end: float
    count: int


@dataclass
class SessionSummary:
    """Summary statistics for a tracking session."""

    total_pitches: int
    min_height: float | None
    max_height: float | None
    avg_height: float | None
    variance: float | None
    std_dev: float | None
    median_height: float | None
    percentile_25: float | None
    percentile_75: float | None
    avg_uncertainty: float | None
    weighted_height: float | None
    weighted_uncertainty: float | None
    confidence_interval_95: tuple[float, float] | None
    quality: QualityDistribution
    pitches_per_minute: float


class SessionAggregator:
    """Collects the measurements of one tracking session.

    Measurements are kept in arrival order and never modified.
    """

    def __init__(self, measurements: Iterable[Measurement] | None = None) -> None:
        self._measurements: list[Measurement] = list(measurements or [])

    @property
    def count(self) -> int:
        return len(self._measurements)

    @property
    def measurements(self) -> list[Measurement]:
        """Snapshot copy of the recorded measurements."""
        return list(self._measurements)

    @property
    def last_measurement(self) -> Measurement | None:
        return self._measurements[-1] if self._measurements else None

    def add(self, measurement: Measurement) -> None:
        self._measurements.append(measurement)

    def clear(self) -> None:
        self._measurements.clear()

    def statistics(self) -> TrackingStatistics:
        """Running count, average, min, max and mean uncertainty."""
        if not self._measurements:
            return TrackingStatistics(
                count=0,
                average=None,
                min=None,
                max=None,
                avg_uncertainty=None,
            )

        heights = [m.height_feet for m in self._measurements]
        uncertainties = [m.uncertainty_feet for m in self._measurements]

        return TrackingStatistics(
            count=len(heights),
            average=sum(heights) / len(heights),
            min=min(heights),
            max=max(heights),
            avg_uncertainty=sum(uncertainties) / len(uncertainties),
        )

    def summary(self) -> SessionSummary:
        """Full descriptive statistics for coaching review."""
        quality = quality_distribution(self._measurements)
        frequency = pitch_frequency(self._measurements)

        if not self._measurements:
            return SessionSummary(
                total_pitches=0,
                min_height=None,
                max_height=None,
                avg_height=None,
                variance=None,
                std_dev=None,
                median_height=None,
                percentile_25=None,
                percentile_75=None,
                avg_uncertainty=None,
                weighted_height=None,
                weighted_uncertainty=None,
                confidence_interval_95=None,
                quality=quality,
                pitches_per_minute=frequency,
            )

        heights = np.array([m.height_feet for m in self._measurements], dtype=np.float64)
        uncertainties = [m.uncertainty_feet for m in self._measurements]

        variance = float(np.var(heights, ddof=1)) if len(heights) > 1 else 0.0
        sorted_heights = sorted(heights.tolist())

        weighted_height: float | None = None
        weighted_unc: float | None = None
        interval: tuple[float, float] | None = None
        if all(u > 0 for u in uncertainties):
            weighted_height, weighted_unc = weighted_average(heights.tolist(), uncertainties)
            interval = confidence_interval(weighted_height, weighted_unc, 0.95)

        return SessionSummary(
            total_pitches=len(sorted_heights),
            min_height=sorted_heights[0],
            max_height=sorted_heights[-1],
            avg_height=float(np.mean(heights)),
            variance=variance,
            std_dev=variance**0.5,
            median_height=compute_percentile(sorted_heights, 50),
            percentile_25=compute_percentile(sorted_heights, 25),
            percentile_75=compute_percentile(sorted_heights, 75),
            avg_uncertainty=sum(uncertainties) / len(uncertainties),
            weighted_height=weighted_height,
            weighted_uncertainty=weighted_unc,
            confidence_interval_95=interval,
            quality=quality,
            pitches_per_minute=frequency,
        )

    def height_distribution(self, bin_count: int = 10) -> list[HeightBin]:
        """Histogram of pitch heights over [min, max].

        The last bin is closed on the right so the maximum is counted.

        Raises:
            InvalidInputError: If bin_count is less than 1
        """
        if bin_count < 1:
            raise InvalidInputError("bin_count must be at least 1")

        if not self._measurements:
            return []

        heights = [m.height_feet for m in self._measurements]
        low = min(heights)
        bin_size = (max(heights) - low) / bin_count

        bins: list[HeightBin] = []
        for i in range(bin_count):
            start = low + i * bin_size
            end = start + bin_size
            last = i == bin_count - 1
            count = sum(1 for h in heights if h >= start and (h <= end if last else h < end))
            bins.append(HeightBin(bin_start=start, bin_end=end, count=count))

        return bins


def compute_percentile(sorted_values: Sequence[float], percentile: float) -> float | None:
    """Linearly interpolated percentile of already-sorted values.

    Args:
        sorted_values: Values in ascending order
        percentile: Percentile to compute (0-100)

    Returns:
        Percentile value or None for an empty sequence
    """
    if not sorted_values:
        return None

    index = (percentile / 100.0) * (len(sorted_values) - 1)
    lower = int(np.floor(index))
    upper = int(np.ceil(index))

    if lower == upper:
        return sorted_values[lower]

    weight = index - lower
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


def quality_distribution(measurements: Iterable[Measurement]) -> QualityDistribution:
    """Count measurements per quality band."""
    excellent = good = fair = poor = 0
    for m in measurements:
        if m.quality_score >= 90:
            excellent += 1
        elif m.quality_score >= 70:
            good += 1
        elif m.quality_score >= 50:
            fair += 1
        else:
            poor += 1

    return QualityDistribution(excellent=excellent, good=good, fair=fair, poor=poor)


def pitch_frequency(measurements: Sequence[Measurement]) -> float:
    """Pitches per minute over the span of measurement timestamps.

    Returns 0 with fewer than two pitches or a zero-length span.
    """
    if len(measurements) < 2:
        return 0.0

    timestamps = [m.timestamp_millis for m in measurements]
    duration_min = (max(timestamps) - min(timestamps)) / 1000 / 60
    if duration_min == 0:
        return 0.0

    return len(measurements) / duration_min


def export_session_data(measurements: Sequence[Measurement], path: Path) -> None:
    """Export session measurements and running statistics to a JSON file.

    Args:
        measurements: Measurements to export
        path: Output file path
    """
    stats = SessionAggregator(measurements).statistics()

    data = {
        "count": stats.count,
        "average": stats.average,
        "min": stats.min,
        "max": stats.max,
        "avg_uncertainty": stats.avg_uncertainty,
        "measurements": [m.to_dict() for m in measurements],
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def import_session_data(path: Path) -> SessionAggregator:
    """Import session measurements from a JSON file.

    Args:
        path: Input file path

    Returns:
        Aggregator holding the reconstructed measurements
    """
    with open(path) as f:
        data = json.load(f)

    return SessionAggregator(Measurement.from_dict(m) for m in data.get("measurements", []))
