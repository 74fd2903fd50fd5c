"""Key-value store backends.

Quick Start:
    from feedhealth.store import create_store

    store = create_store("file", "data/feedhealth.json")   # JSON file
    store = create_store("sqlite", "data/feedhealth.db")   # SQLite
    store = create_store("memory")                          # In-memory
"""

from feedhealth.store.factory import create_store, open_store
from feedhealth.store.file import JsonFileStore
from feedhealth.store.memory import MemoryStore
from feedhealth.store.sqlite import SQLiteStore

__all__ = [
    "JsonFileStore",
    "MemoryStore",
    "SQLiteStore",
    "create_store",
    "open_store",
]
