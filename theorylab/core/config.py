"""
Configuration management for the theorylab music-theory engine.
Loads settings from environment variables.
"""

from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Fretboard rendering
    max_fret: int = 15
    piano_default_key_count: int = 61

    # Initial selection
    default_key: str = "C"
    default_category: str = "diatonicModes"
    default_item: str = "ionian"
    default_instrument: str = "bassGuitar"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="THEORYLAB_",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()

