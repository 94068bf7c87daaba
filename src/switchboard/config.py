"""Configuration management for switchboard."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOME = Path.home() / ".switchboard"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SWITCHBOARD_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Session modes, read once at startup
    wrapper_mode: bool = Field(default=False, description="Running under a supervising wrapper process")
    suppress_welcome: bool = Field(default=False, description="Do not print the interactive banner")
    skip_confirmation: bool = Field(default=True, description="Run corrected commands without asking first")

    # Command matching
    match_ratio: float = Field(default=0.34, ge=0.0, le=1.0, description="Allowed edits per query character")
    match_min_distance: int = Field(default=1, ge=0, description="Allowed edits for very short queries")

    # History
    history_file: Path = Field(default=DEFAULT_HOME / "history", description="Interactive history file")
    history_max_entries: int = Field(default=1000, ge=0, description="Maximum lines kept in history")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Log level")

    bin_name: str = Field(default="switchboard", description="Program name shown in hints")


def load_settings() -> Settings:
    """Load settings from the environment and an optional .env file."""
    return Settings()
