"""
FeedHealth - Per-feed load-time history for feed readers.

Records how long each feed takes to load, counts consecutive slow or
failed loads, and tells the refresh loop which feeds are slow and which
to skip.

Quick Start:
    >>> from feedhealth import FeedHealthTracker, MemoryStore
    >>> tracker = FeedHealthTracker(MemoryStore())
    >>> _ = tracker.record_load_time("Hacker News", 1.2)
    >>> tracker.should_skip_feed("Hacker News")
    False

Architecture:
    Tracker: FeedHealthTracker
    Stores: MemoryStore, JsonFileStore, SQLiteStore
    Observers: LoggingObserver, CallbackObserver
"""

from feedhealth.core.config import Settings, get_settings
from feedhealth.core.exceptions import (
    CodecError,
    ConfigurationError,
    FeedHealthError,
    StoreError,
)
from feedhealth.models.health import FeedHealth, LoadOutcome
from feedhealth.protocols.observer import (
    CallbackObserver,
    LoadTimeEvent,
    LoadTimeObserver,
    NullObserver,
)
from feedhealth.protocols.store import KeyValueStore
from feedhealth.reporter.simple import LoggingObserver
from feedhealth.store.factory import create_store, open_store
from feedhealth.store.file import JsonFileStore
from feedhealth.store.memory import MemoryStore
from feedhealth.store.sqlite import SQLiteStore
from feedhealth.tracker import (
    FAILED_FEEDS_KEY,
    SLOW_THRESHOLD_KEY,
    FeedHealthTracker,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Tracker
    "FAILED_FEEDS_KEY",
    "SLOW_THRESHOLD_KEY",
    "FeedHealthTracker",
    # Models
    "FeedHealth",
    "LoadOutcome",
    # Observers
    "CallbackObserver",
    "LoadTimeEvent",
    "LoadTimeObserver",
    "LoggingObserver",
    "NullObserver",
    # Stores
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "create_store",
    "open_store",
    # Configuration
    "Settings",
    "get_settings",
    # Exceptions
    "CodecError",
    "ConfigurationError",
    "FeedHealthError",
    "StoreError",
]
