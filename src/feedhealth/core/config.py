"""FeedHealth configuration.

Settings loaded from environment variables with FEEDHEALTH_ prefix.

Example:
    >>> from feedhealth.core.config import get_settings
    >>> settings = get_settings(max_failures=5)
    >>> settings.max_failures
    5
    >>> settings.default_slow_threshold
    10.0
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tracker and store settings.

    Loads from environment variables with FEEDHEALTH_ prefix.

    Example:
        >>> from feedhealth.core.config import Settings
        >>> s = Settings(store_backend="sqlite", store_path="health.db")
        >>> s.store_backend
        'sqlite'
        >>> s.failure_cutoff
        45.0
    """

    model_config = SettingsConfigDict(
        env_prefix="FEEDHEALTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Thresholds
    default_slow_threshold: float = Field(
        default=10.0, gt=0.0, description="Seconds above which a load counts as slow"
    )
    max_failures: int = Field(
        default=3, ge=1, description="Failure count at which a feed is skipped"
    )
    failure_cutoff: float = Field(
        default=45.0, gt=0.0, description="Seconds at or above which a load counts as failed"
    )

    # Store
    store_backend: Literal["memory", "file", "sqlite"] = Field(
        default="file", description="Key-value store backend"
    )
    store_path: Path = Field(
        default=Path("./data/feedhealth.json"), description="Path for file-based stores"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from feedhealth.core.config import get_settings
        >>> get_settings(store_backend="memory").store_backend
        'memory'
    """
    return Settings(**overrides)
