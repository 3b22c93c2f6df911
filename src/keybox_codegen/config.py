"""
Configuration: typed, validated settings loaded from environment/.env.

Uses pydantic-settings so a missing KEYBOX_PATH is reported once, at
startup, before the pipeline touches any file.

  KEYBOX_PATH  directory containing keybox.xml (required)
  LOG_LEVEL    structlog filtering level (default INFO)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class AppSettings(BaseSettings):
    """
    Root settings for a codegen run.

    Load order (highest priority first):
      1. Environment variables
      2. .env file in the working directory
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    keybox_path: Path = Field(description="Directory that holds keybox.xml")
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level
