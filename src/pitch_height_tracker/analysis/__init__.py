"""Pure analysis logic: uncertainty propagation, validation, and session metrics.

This module contains NO camera or UI code.
All functions operate on plain numbers or typed dataclasses.
"""

from pitch_height_tracker.analysis.metrics import SessionAggregator, SessionSummary
from pitch_height_tracker.analysis.uncertainty import UncertainValue

__all__ = ["SessionAggregator", "SessionSummary", "UncertainValue"]
