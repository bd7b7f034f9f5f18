"""Measurement uncertainty estimation and propagation.

This module is pure logic with NO I/O. All uncertainties are absolute
one-sigma values in the unit of the quantity they describe (feet for
heights, pixels for pixel samples); quality scores are integers [0, 100].
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np

from pitch_height_tracker.core.exceptions import InvalidInputError

# z-scores for the supported two-sided confidence levels
Z_SCORES: dict[float, float] = {
    0.90: 1.645,
    0.95: 1.96,
    0.99: 2.576,
}
DEFAULT_CONFIDENCE_LEVEL = 0.95

DEFAULT_CALIBRATION_UNCERTAINTY = 0.1  # feet
BASE_NOISE_PIXELS = 1.0


class UncertainValue(NamedTuple):
    """A value with its one-sigma uncertainty."""

    mean: float
    uncertainty: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Python's round() uses banker's rounding; scores are rounded half-up.
    """
    return int(math.floor(value + 0.5))


def standard_error(samples: Sequence[float]) -> float:
    """Standard error of the mean using the Bessel-corrected deviation.

    Returns 0 for fewer than two samples.
    """
    if len(samples) < 2:
        return 0.0

    values = np.asarray(samples, dtype=np.float64)
    std_dev = float(np.std(values, ddof=1))
    return std_dev / math.sqrt(len(values))


def confidence_interval(
    mean: float,
    std_error: float,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> tuple[float, float]:
    """Two-sided normal confidence interval around ``mean``.

    Levels other than 0.90, 0.95 and 0.99 fall back to 95%.

    Returns:
        Tuple of (lower, upper)
    """
    z = Z_SCORES.get(confidence_level, Z_SCORES[DEFAULT_CONFIDENCE_LEVEL])
    margin = z * std_error
    return mean - margin, mean + margin


def propagate_multiplication(
    value1: float,
    uncertainty1: float,
    value2: float,
    uncertainty2: float,
) -> float:
    """Absolute uncertainty of ``value1 * value2``.

    Relative uncertainties combine in quadrature. Both values must be
    non-zero.
    """
    relative1 = uncertainty1 / value1
    relative2 = uncertainty2 / value2
    combined_relative = math.sqrt(relative1**2 + relative2**2)
    return abs(value1 * value2) * combined_relative


def propagate_addition(*uncertainties: float) -> float:
    """Root-sum-of-squares of independent uncertainties."""
    return math.sqrt(sum(u * u for u in uncertainties))


def calibration_uncertainty(
    pixel_samples: Sequence[float],
    reference_height_feet: float,
) -> float:
    """Calibration uncertainty in feet from repeated pixel-height samples.

    The pixel standard error is converted to feet with the scale factor
    derived from the samples. Fewer than two samples give the default
    of 0.1 ft.
    """
    if len(pixel_samples) < 2:
        return DEFAULT_CALIBRATION_UNCERTAINTY

    mean_pixels = float(np.mean(np.asarray(pixel_samples, dtype=np.float64)))
    pixels_per_foot = mean_pixels / reference_height_feet
    return standard_error(pixel_samples) / pixels_per_foot


def pitch_uncertainty(
    calibration_uncertainty_feet: float,
    measurement_noise_feet: float,
    quality_score: float,
) -> float:
    """Pitch height uncertainty scaled by tracking quality.

    The quality factor ranges from 1.0 at quality 100 to 2.0 at quality 0.
    """
    base = propagate_addition(calibration_uncertainty_feet, measurement_noise_feet)
    quality_factor = 1 + (100 - quality_score) / 100
    return base * quality_factor


def measurement_noise(pixels_per_foot: float, detection_confidence: float) -> float:
    """Detector position noise in feet.

    One pixel of base noise, tripled at zero confidence.
    """
    confidence_factor = 1 + (100 - detection_confidence) / 50
    noise_pixels = BASE_NOISE_PIXELS * confidence_factor
    return noise_pixels / pixels_per_foot


def uncertainty_to_quality(uncertainty: float, max_uncertainty: float = 1.0) -> int:
    """Map an uncertainty onto a quality score [0, 100].

    Zero (or negative) uncertainty scores 100; ``max_uncertainty`` or more
    scores 0.
    """
    normalized = min(max(uncertainty / max_uncertainty, 0.0), 1.0)
    return round_half_up((1 - normalized) * 100)


def calibration_quality_score(uncertainty_feet: float, measurement_count: int) -> int:
    """Quality of a calibration from its uncertainty and sample count.

    Uncertainty contributes 70%, sample count 30% (saturating at five).
    """
    uncertainty_score = max(0.0, 100 - uncertainty_feet * 100)
    measurement_score = min(100, measurement_count * 20)
    return round_half_up(uncertainty_score * 0.7 + measurement_score * 0.3)


def bayesian_update(
    prior_mean: float,
    prior_uncertainty: float,
    new_value: float,
    new_uncertainty: float,
) -> UncertainValue:
    """Precision-weighted fusion of a prior estimate with a new measurement.

    The posterior uncertainty never exceeds the smaller input uncertainty,
    and the posterior mean lies between the inputs, nearer the more
    precise one.
    """
    prior_precision = 1 / prior_uncertainty**2
    new_precision = 1 / new_uncertainty**2
    posterior_precision = prior_precision + new_precision

    posterior_mean = (
        prior_precision * prior_mean + new_precision * new_value
    ) / posterior_precision
    posterior_uncertainty = 1 / math.sqrt(posterior_precision)

    return UncertainValue(posterior_mean, posterior_uncertainty)


def weighted_average(
    values: Sequence[float],
    uncertainties: Sequence[float],
) -> UncertainValue:
    """Inverse-variance weighted mean and its uncertainty.

    Raises:
        InvalidInputError: If the sequences are empty or differ in length
    """
    if len(values) != len(uncertainties) or len(values) == 0:
        raise InvalidInputError(
            "Values and uncertainties arrays must have same non-zero length"
        )

    weights = 1 / np.asarray(uncertainties, dtype=np.float64) ** 2
    total_weight = float(np.sum(weights))

    mean = float(np.sum(np.asarray(values, dtype=np.float64) * weights)) / total_weight
    uncertainty = 1 / math.sqrt(total_weight)

    return UncertainValue(mean, uncertainty)
