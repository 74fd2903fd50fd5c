"""Custom exceptions.

Example:
    >>> from feedhealth.core.exceptions import StoreError, FeedHealthError
    >>> isinstance(StoreError("disk full"), FeedHealthError)
    True
"""

from __future__ import annotations


class FeedHealthError(Exception):
    """Base exception for FeedHealth."""


class StoreError(FeedHealthError):
    """Key-value store read or write failed.

    Example:
        >>> from feedhealth.core.exceptions import StoreError
        >>> raise StoreError("database is locked")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        StoreError: database is locked
    """


class CodecError(FeedHealthError):
    """Stored payload could not be encoded or decoded."""


class ConfigurationError(FeedHealthError):
    """Configuration is invalid.

    Example:
        >>> from feedhealth.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("unknown backend")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: unknown backend
    """
