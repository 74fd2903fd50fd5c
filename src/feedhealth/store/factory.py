"""Store factory.

Builds a key-value store backend from a name and path, or from settings.

Example:
    >>> from feedhealth.store.factory import create_store
    >>> type(create_store("memory")).__name__
    'MemoryStore'
"""

from __future__ import annotations

from pathlib import Path

from feedhealth.core.config import Settings
from feedhealth.core.exceptions import ConfigurationError
from feedhealth.protocols.store import KeyValueStore
from feedhealth.store.file import JsonFileStore
from feedhealth.store.memory import MemoryStore
from feedhealth.store.sqlite import SQLiteStore


def create_store(backend: str, path: str | Path | None = None) -> KeyValueStore:
    """Create a store backend.

    Args:
        backend: One of "memory", "file", "sqlite".
        path: File path for "file" and "sqlite" backends.

    Raises:
        ConfigurationError: If the backend is unknown or a path is missing.
    """
    backend = backend.lower()
    if backend == "memory":
        return MemoryStore()
    if backend in ("file", "sqlite") and path is None:
        raise ConfigurationError(f"Store backend {backend!r} requires a path")
    if backend == "file":
        return JsonFileStore(path)
    if backend == "sqlite":
        return SQLiteStore(path)
    raise ConfigurationError(f"Unknown store backend: {backend!r}")


def open_store(settings: Settings | None = None) -> KeyValueStore:
    """Create the store configured by settings (default: environment)."""
    settings = settings or Settings()
    return create_store(settings.store_backend, settings.store_path)
