"""Application configuration via Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CalibrationSettings(BaseSettings):
    """Calibration system settings."""

    model_config = SettingsConfigDict(env_prefix="CALIBRATION_")

    max_age_millis: int = 3_600_000
    default_uncertainty_feet: float = 0.1
    full_confidence_measurements: int = 5
    profile_path: str = "data/calibration/profile.json"


class TrackingSettings(BaseSettings):
    """Per-frame measurement gating and scoring parameters."""

    model_config = SettingsConfigDict(env_prefix="TRACKING_")

    min_confidence: int = Field(default=50, ge=0, le=100)
    tracking_jitter_feet: float = 0.1
    full_pixel_count: int = 200


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
