"""Frame-by-frame measurement pipeline orchestration."""

from pitch_height_tracker.pipeline.processor import MeasurementPipeline

__all__ = ["MeasurementPipeline"]
