"""Logging configuration and utilities."""

import logging
import sys
from pathlib import Path

from pitch_height_tracker.core.config import LoggingSettings

ROOT_LOGGER_NAME = "pitch_height_tracker"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the pitch_height_tracker namespace.

    Calling this again replaces the previous handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Configure package logger
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(log_level)

    # Clear existing handlers
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)


def configure_logging(settings: LoggingSettings, debug: bool = False) -> None:
    """Apply LOG_* settings, with ``debug`` forcing the DEBUG level."""
    level = "DEBUG" if debug else settings.level
    setup_logging(level, settings.file)
    get_logger(__name__).debug("Logging configured at %s", level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger under the pitch_height_tracker namespace
    """
    # Ensure name is under pitch_height_tracker namespace
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
