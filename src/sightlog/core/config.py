"""SightLog configuration.

Application settings loaded from environment variables with SIGHTLOG_ prefix.

Example:
    >>> from sightlog.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.port
    3004
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with SIGHTLOG_ prefix.

    Example:
        >>> from sightlog.core.config import Settings
        >>> s = Settings(storage_path="sightings.json")
        >>> s.storage_path.name
        'sightings.json'
        >>> s.visit_cookie_name
        'unique-site-visit'
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGHTLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=3004, ge=1, le=65535, description="TCP port to listen on")

    # Storage
    storage_path: Path = Field(default=Path("data.json"), description="JSON document file")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "plain"] = Field(
        default="console", description="Log format: console (rich) or plain"
    )

    # Visits
    visit_cookie_name: str = Field(default="unique-site-visit", min_length=1)


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from sightlog.core.config import get_settings
        >>> s = get_settings(port=8080)
        >>> s.port
        8080
    """
    return Settings(**overrides)
