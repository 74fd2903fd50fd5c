"""Load-time observer protocol.

Observers receive a ``LoadTimeEvent`` each time a feed load is recorded.

Example:
    >>> from feedhealth.protocols.observer import LoadTimeEvent
    >>> from feedhealth.models.health import LoadOutcome
    >>> event = LoadTimeEvent(
    ...     feed_title="Daring Fireball",
    ...     load_time=1.5,
    ...     outcome=LoadOutcome.FAST,
    ...     failure_count=0,
    ... )
    >>> event.to_payload()
    {'feedTitle': 'Daring Fireball', 'loadTime': 1.5}
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from feedhealth.models.health import LoadOutcome


@dataclass(frozen=True)
class LoadTimeEvent:
    """A recorded feed load.

    Attributes:
        feed_title: Feed identifier
        load_time: Recorded duration in seconds (negative for explicit failures)
        outcome: How the load was classified
        failure_count: Failure count after the update
        recorded_at: When the load was recorded
    """

    feed_title: str
    load_time: float
    outcome: LoadOutcome
    failure_count: int
    recorded_at: datetime = field(default_factory=datetime.now)

    def to_payload(self) -> dict[str, Any]:
        """Notification payload as published to UI consumers."""
        return {"feedTitle": self.feed_title, "loadTime": self.load_time}


@runtime_checkable
class LoadTimeObserver(Protocol):
    """Protocol for load-time observers.

    Example:
        >>> class PrintObserver:
        ...     def on_load_time(self, event: LoadTimeEvent) -> None:
        ...         print(f"{event.feed_title}: {event.load_time:.1f}s")
    """

    def on_load_time(self, event: LoadTimeEvent) -> None:
        """Handle a recorded load.

        Called synchronously after tracker state is updated.
        """
        ...


class NullObserver:
    """No-op observer."""

    def on_load_time(self, event: LoadTimeEvent) -> None:
        """Discard event."""
        pass


class CallbackObserver:
    """Observer that forwards events to a callback function.

    Example:
        >>> events = []
        >>> observer = CallbackObserver(events.append)
    """

    def __init__(self, callback: Callable[[LoadTimeEvent], Any]):
        self._callback = callback

    def on_load_time(self, event: LoadTimeEvent) -> None:
        self._callback(event)
