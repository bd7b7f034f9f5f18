"""Plausibility checks for pitch, calibration and detection values."""

from __future__ import annotations

from collections.abc import Sized

MAX_PLAUSIBLE_HEIGHT_FEET = 12.0
MAX_PLAUSIBLE_UNCERTAINTY_FEET = 5.0


def is_valid_height(height_feet: float) -> bool:
    """Pitch heights fall between 0 and 12 ft, exclusive."""
    return 0 < height_feet < MAX_PLAUSIBLE_HEIGHT_FEET


def is_valid_uncertainty(uncertainty_feet: float) -> bool:
    return 0 < uncertainty_feet < MAX_PLAUSIBLE_UNCERTAINTY_FEET


def is_valid_quality_score(score: float) -> bool:
    return 0 <= score <= 100


def is_valid_confidence(confidence: float) -> bool:
    """Detection confidence is a percentage [0, 100]."""
    return 0 <= confidence <= 100


def is_valid_calibration_data(reference_height_feet: float, pixel_height: float) -> bool:
    """A reference height must be a plausible height and its pixel size positive."""
    return is_valid_height(reference_height_feet) and pixel_height > 0


def has_valid_sample_size(samples: Sized, min_size: int = 3) -> bool:
    return len(samples) >= min_size
