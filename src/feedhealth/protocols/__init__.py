"""Protocol definitions - all extension points."""

from feedhealth.protocols.observer import (
    CallbackObserver,
    LoadTimeEvent,
    LoadTimeObserver,
    NullObserver,
)
from feedhealth.protocols.store import KeyValueStore

__all__ = [
    # Store
    "KeyValueStore",
    # Observer
    "CallbackObserver",
    "LoadTimeEvent",
    "LoadTimeObserver",
    "NullObserver",
]
