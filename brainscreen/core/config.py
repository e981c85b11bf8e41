"""
Configuration management for the brainscreen biomarker system.
Loads settings from environment variables.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "brainscreen"
    app_version: str = "0.1.0"
    debug: bool = False

    # Acquisition
    sampling_rate: float = 520.0  # Hz, used for frequency labeling only
    queue_capacity: int = 100  # bursts held before the oldest is dropped

    # Signal Processing
    frequency_resolution: float = 0.1  # Hz per spectrum bin
    outlier_limit: float = 100.0  # microvolts
    reference_band_low: float = 3.0  # Hz
    reference_band_high: float = 30.0  # Hz

    # Recording
    recording_patient_id: str = "X X X X"
    recording_id: str = "Startdate"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance."""
    return settings
