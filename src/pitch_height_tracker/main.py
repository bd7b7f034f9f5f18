"""Command-line entry point for Pitch Height Tracker.

Supports offline calibration from recorded reference samples and replay of
recorded ball detections through the measurement pipeline.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pitch_height_tracker.analysis.metrics import SessionSummary, export_session_data
from pitch_height_tracker.core.config import Settings, get_settings
from pitch_height_tracker.core.exceptions import (
    CalibrationError,
    InvalidInputError,
    PitchTrackerError,
)
from pitch_height_tracker.core.logging import configure_logging, get_logger
from pitch_height_tracker.core.types import BallDetection
from pitch_height_tracker.pipeline.processor import MeasurementPipeline
from pitch_height_tracker.vision.calibration import CalibrationEngine

logger = get_logger(__name__)


def run_calibrate(args: argparse.Namespace, settings: Settings) -> int:
    """Finalize a calibration from pixel samples and optionally save it.

    Returns:
        Exit code
    """
    if args.reference <= 0:
        raise CalibrationError("Reference height must be positive")

    engine = CalibrationEngine(settings.calibration)
    engine.start_calibration(args.reference)
    for sample in args.samples:
        engine.add_measurement(sample)

    calibration = engine.finalize_calibration(args.reference)

    print(f"Pixels per foot: {calibration.pixels_per_foot:.3f}")
    print(f"Uncertainty:     ±{calibration.uncertainty_feet:.3f} ft")
    print(f"Samples:         {calibration.measurement_count}")
    print(f"Quality:         {engine.get_quality_score()}/100")

    if args.output is not None:
        engine.save_calibration(args.output)

    return 0


def run_replay(args: argparse.Namespace, settings: Settings) -> int:
    """Replay recorded detections against a saved calibration.

    Returns:
        Exit code
    """
    if args.max_age_ms is not None:
        calibration_settings = settings.calibration.model_copy(
            update={"max_age_millis": args.max_age_ms}
        )
        settings = settings.model_copy(update={"calibration": calibration_settings})

    engine = CalibrationEngine(settings.calibration)
    engine.load_calibration(args.calibration)

    with open(args.detections) as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise InvalidInputError("Detections file must contain a JSON list")
    detections = [BallDetection.from_dict(d) for d in records]

    pipeline = MeasurementPipeline(engine, settings)
    with pipeline:
        measurements = pipeline.process_batch(detections)

    logger.info("Replayed %d frames, %d measurements", len(detections), len(measurements))
    _print_summary(pipeline.session.summary())

    if args.export is not None:
        export_session_data(measurements, args.export)
        logger.info("Exported session to %s", args.export)

    return 0


def _print_summary(summary: SessionSummary) -> None:
    print(f"Pitches: {summary.total_pitches}")
    if summary.total_pitches == 0:
        return

    print(f"Average: {summary.avg_height:.2f} ft (median {summary.median_height:.2f} ft)")
    print(f"Range:   {summary.min_height:.2f} - {summary.max_height:.2f} ft")
    print(f"Std dev: {summary.std_dev:.3f} ft")
    print(f"Avg uncertainty: ±{summary.avg_uncertainty:.3f} ft")
    if summary.confidence_interval_95 is not None:
        lower, upper = summary.confidence_interval_95
        print(f"Weighted height: {summary.weighted_height:.2f} ft (95% CI {lower:.2f}-{upper:.2f})")
    q = summary.quality
    print(f"Quality: excellent={q.excellent} good={q.good} fair={q.fair} poor={q.poor}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pitch-height",
        description="Pitch Height Tracker - calibrated pitch arc height measurement",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    calibrate = subparsers.add_parser(
        "calibrate", help="Compute a calibration from reference pixel heights"
    )
    calibrate.add_argument(
        "--reference",
        type=float,
        required=True,
        help="Known reference height in feet",
    )
    calibrate.add_argument("samples", type=float, nargs="+", help="Measured pixel heights")
    calibrate.add_argument("--output", type=Path, help="Save calibration JSON to this path")

    replay = subparsers.add_parser("replay", help="Replay recorded detections")
    replay.add_argument("detections", type=Path, help="JSON list of detections")
    replay.add_argument(
        "--calibration",
        type=Path,
        required=True,
        help="Calibration JSON produced by 'calibrate --output'",
    )
    replay.add_argument(
        "--max-age-ms",
        type=int,
        default=None,
        help="Override the calibration max age (milliseconds)",
    )
    replay.add_argument("--export", type=Path, help="Export measurements to this JSON path")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.logging, debug=args.debug)

    handlers = {"calibrate": run_calibrate, "replay": run_replay}

    try:
        return handlers[args.command](args, settings)

    except CalibrationError as e:
        logger.error("Calibration error: %s", e)
        return 1

    except (PitchTrackerError, OSError, ValueError) as e:
        logger.error("Tracking error: %s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
