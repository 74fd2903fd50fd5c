"""Core configuration and exceptions."""

from feedhealth.core.config import Settings, get_settings
from feedhealth.core.exceptions import (
    CodecError,
    ConfigurationError,
    FeedHealthError,
    StoreError,
)

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Exceptions
    "CodecError",
    "ConfigurationError",
    "FeedHealthError",
    "StoreError",
]
