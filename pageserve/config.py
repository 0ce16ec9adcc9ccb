"""
Configuration for the page server.
Loads settings from environment variables (or a local .env file) with
defaults matching the historical hardcoded values.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings loaded from environment variables."""

    # Listener
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, ge=0, le=65535, alias="PORT")

    # Served document, relative to the working directory
    index_file: str = Field(default="./index.html", alias="INDEX_FILE")

    # Logging
    log_level: Literal["critical", "error", "warning", "info", "debug"] = Field(default="info", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, value):
        return value.lower() if isinstance(value, str) else value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
