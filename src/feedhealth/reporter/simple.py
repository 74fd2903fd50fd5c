"""Logging-based load-time observer.

Example:
    >>> from feedhealth.reporter.simple import LoggingObserver
    >>> observer = LoggingObserver()

    # Output in logs:
    # [FAST] Hacker News: 1.20s (failures: 0)
    # [SLOW] Ars Technica: 14.80s (failures: 1)
    # [FAILED] Dead Blog: failed (failures: 3)
"""

from __future__ import annotations

import logging

from feedhealth.models.health import LoadOutcome
from feedhealth.protocols.observer import LoadTimeEvent


class LoggingObserver:
    """Logs each recorded feed load.

    Fast loads log at ``fast_level`` (DEBUG by default); slow and failed
    loads log at WARNING.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        fast_level: int = logging.DEBUG,
    ):
        """Initialize the observer.

        Args:
            logger: Logger to use (default: feedhealth.loads logger)
            fast_level: Logging level for fast loads
        """
        self._logger = logger or logging.getLogger("feedhealth.loads")
        self._fast_level = fast_level

    def on_load_time(self, event: LoadTimeEvent) -> None:
        level = self._fast_level if event.outcome is LoadOutcome.FAST else logging.WARNING
        timing = "failed" if event.load_time < 0 else f"{event.load_time:.2f}s"
        self._logger.log(
            level,
            f"[{event.outcome.value.upper()}] {event.feed_title}: {timing} "
            f"(failures: {event.failure_count})",
        )
