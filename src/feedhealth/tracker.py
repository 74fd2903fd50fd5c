"""Feed health tracker.

Records how long each feed takes to load, keeps a persisted count of
consecutive slow or failed loads per feed, and answers whether a feed
is slow or should be skipped on the next refresh.

Classification of a recorded duration, in order:

1. ``duration >= failure_cutoff`` (45s) or ``duration < 0``: hard failure,
   failure count increments without cap.
2. ``duration > slow_threshold``: slow load, failure count increments
   only while it is below ``max_failures``.
3. Otherwise: fast load, failure count resets to 0.

Example:
    >>> from feedhealth.store.memory import MemoryStore
    >>> from feedhealth.tracker import FeedHealthTracker
    >>> tracker = FeedHealthTracker(MemoryStore())
    >>> for seconds in [5, 12, 12, 12, 50]:
    ...     _ = tracker.record_load_time("A", seconds)
    >>> tracker.get_failure_count("A")
    4
    >>> tracker.should_skip_feed("A")
    True
    >>> tracker.is_feed_slow("A")
    True
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Generator, Iterable
from contextlib import contextmanager

from feedhealth.core.config import Settings
from feedhealth.core.exceptions import CodecError, StoreError
from feedhealth.models.health import (
    FeedHealth,
    LoadOutcome,
    decode_failure_counts,
    decode_threshold,
    encode_failure_counts,
    encode_threshold,
)
from feedhealth.protocols.observer import LoadTimeEvent, LoadTimeObserver
from feedhealth.protocols.store import KeyValueStore

logger = logging.getLogger("feedhealth.tracker")

FAILED_FEEDS_KEY = "slowOrFailedFeeds"
SLOW_THRESHOLD_KEY = "feedSlowThreshold"

# Duration recorded for an explicit failure
FAILED_LOAD_TIME = -1.0


class FeedHealthTracker:
    """Per-feed load-time history and failure counter.

    Load times live in memory for the life of the tracker. Failure counts
    are read from the store once on construction and written back after
    every change. Persistence is best-effort: a failed write leaves the
    in-memory state correct and is not reported.

    All operations hold a single lock, so one tracker can be shared
    between threads.

    Example:
        >>> from feedhealth.store.memory import MemoryStore
        >>> tracker = FeedHealthTracker(MemoryStore())
        >>> tracker.get_load_time("never seen")
        0.0
        >>> tracker.should_skip_feed("never seen")
        False

    Attributes:
        store: Backing key-value store
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        settings: Settings | None = None,
        observers: Iterable[LoadTimeObserver] = (),
    ) -> None:
        """Initialize the tracker and load persisted failure counts.

        Args:
            store: Durable key-value store for failure counts and threshold override.
            settings: Threshold defaults (default: ``Settings()``).
            observers: Observers notified on every recorded load.
        """
        self.store = store
        self._settings = settings or Settings()
        self._observers: list[LoadTimeObserver] = list(observers)
        self._lock = threading.RLock()
        self._load_times: dict[str, float] = {}
        self._failure_counts: dict[str, int] = self._load_failure_counts()

    # --- Thresholds ---

    @property
    def slow_threshold(self) -> float:
        """Seconds above which a successful load is slow.

        The store override wins when it is a positive number.
        """
        try:
            data = self.store.get(SLOW_THRESHOLD_KEY)
            override = decode_threshold(data) if data is not None else 0.0
        except (StoreError, CodecError, OSError):
            override = 0.0
        return override if override > 0 else self._settings.default_slow_threshold

    def set_slow_threshold(self, seconds: float) -> None:
        """Persist a slow-threshold override. Zero or less restores the default."""
        try:
            self.store.set(SLOW_THRESHOLD_KEY, encode_threshold(max(seconds, 0.0)))
        except (StoreError, OSError):
            pass

    @property
    def max_failures(self) -> int:
        """Failure count at which a feed is skipped."""
        return self._settings.max_failures

    @property
    def failure_cutoff(self) -> float:
        """Duration at or above which a load is a hard failure."""
        return self._settings.failure_cutoff

    # --- Observers ---

    def subscribe(self, observer: LoadTimeObserver) -> None:
        """Register an observer for recorded loads."""
        with self._lock:
            self._observers.append(observer)

    def unsubscribe(self, observer: LoadTimeObserver) -> None:
        """Remove a previously registered observer. Unknown observers are ignored."""
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    # --- Recording ---

    def classify(self, duration: float) -> LoadOutcome:
        """Classify a load duration without recording it.

        Example:
            >>> from feedhealth.store.memory import MemoryStore
            >>> tracker = FeedHealthTracker(MemoryStore())
            >>> [tracker.classify(d).value for d in (3.0, 10.5, 45.0, -1.0)]
            ['fast', 'slow', 'failed', 'failed']
        """
        if duration >= self.failure_cutoff or duration < 0:
            return LoadOutcome.FAILED
        if duration > self.slow_threshold:
            return LoadOutcome.SLOW
        return LoadOutcome.FAST

    def record_load_time(self, feed_title: str, duration: float) -> LoadTimeEvent:
        """Record a feed load and update its failure count.

        Args:
            feed_title: Feed identifier.
            duration: Load time in seconds; negative marks an explicit failure.

        Returns:
            The event delivered to observers.
        """
        with self._lock:
            self._load_times[feed_title] = duration
            outcome = self.classify(duration)
            current = self._failure_counts.get(feed_title)

            if outcome is LoadOutcome.FAILED:
                self._failure_counts[feed_title] = (current or 0) + 1
            elif outcome is LoadOutcome.SLOW:
                if current is None:
                    self._failure_counts[feed_title] = 1
                elif current < self.max_failures:
                    self._failure_counts[feed_title] = current + 1
            else:
                self._failure_counts[feed_title] = 0
            self._save_failure_counts()

            event = LoadTimeEvent(
                feed_title=feed_title,
                load_time=duration,
                outcome=outcome,
                failure_count=self._failure_counts[feed_title],
            )
            self._notify(event)
            return event

    def record_failed_feed(self, feed_title: str) -> LoadTimeEvent:
        """Record an explicit load failure."""
        return self.record_load_time(feed_title, FAILED_LOAD_TIME)

    @contextmanager
    def timed(self, feed_title: str) -> Generator[None, None, None]:
        """Time a feed load and record it.

        An exception raised inside the block is recorded as a failure
        and re-raised.

        Example:
            >>> from feedhealth.store.memory import MemoryStore
            >>> tracker = FeedHealthTracker(MemoryStore())
            >>> with tracker.timed("Lobsters"):
            ...     pass
            >>> tracker.get_failure_count("Lobsters")
            0
        """
        start = time.perf_counter()
        try:
            yield
        except Exception:
            self.record_failed_feed(feed_title)
            raise
        self.record_load_time(feed_title, time.perf_counter() - start)

    # --- Queries ---

    def get_load_time(self, feed_title: str) -> float:
        """Last recorded duration, or 0.0 if never recorded."""
        with self._lock:
            return self._load_times.get(feed_title, 0.0)

    def get_failure_count(self, feed_title: str) -> int:
        """Current failure count, or 0 if never recorded."""
        with self._lock:
            return self._failure_counts.get(feed_title, 0)

    def should_skip_feed(self, feed_title: str) -> bool:
        """Whether the feed has reached ``max_failures``."""
        return self.get_failure_count(feed_title) >= self.max_failures

    def is_feed_slow(self, feed_title: str) -> bool:
        """Whether the last successful load exceeded the slow threshold.

        Explicit failures are recorded as negative durations and are never slow.
        """
        load_time = self.get_load_time(feed_title)
        return load_time > self.slow_threshold and load_time > 0

    def performance_score(self, feed_title: str) -> int:
        """Score from 0 (worst) to 10 favouring fast, reliable feeds.

        Example:
            >>> from feedhealth.store.memory import MemoryStore
            >>> tracker = FeedHealthTracker(MemoryStore())
            >>> _ = tracker.record_load_time("Slashdot", 3.0)
            >>> tracker.performance_score("Slashdot")
            8
        """
        load_time = self.get_load_time(feed_title)
        failures = self.get_failure_count(feed_title)

        score = 10
        if load_time > 5:
            score -= 5
        elif load_time > 2:
            score -= 2
        score -= min(failures * 3, 10)
        return max(0, score)

    def health(self, feed_title: str) -> FeedHealth:
        """Snapshot of one feed's health."""
        with self._lock:
            return FeedHealth(
                title=feed_title,
                load_time=self.get_load_time(feed_title),
                failure_count=self.get_failure_count(feed_title),
                skipped=self.should_skip_feed(feed_title),
                slow=self.is_feed_slow(feed_title),
                score=self.performance_score(feed_title),
            )

    @property
    def load_times(self) -> dict[str, float]:
        """Copy of the recorded load times."""
        with self._lock:
            return dict(self._load_times)

    @property
    def failure_counts(self) -> dict[str, int]:
        """Copy of the failure counts."""
        with self._lock:
            return dict(self._failure_counts)

    def speed_report(self) -> list[FeedHealth]:
        """Health of every feed with a recorded load, skipped first then slowest first."""
        with self._lock:
            report = [self.health(title) for title in self._load_times]
        return sorted(report, key=lambda h: (not h.skipped, -h.load_time))

    def problem_feeds(self, feed_titles: Iterable[str]) -> list[str]:
        """Titles with any recorded failures, in input order."""
        return [title for title in feed_titles if self.get_failure_count(title) > 0]

    def partition(self, feed_titles: Iterable[str]) -> tuple[list[str], list[str]]:
        """Split a refresh batch into feeds to fetch and feeds to skip."""
        to_fetch: list[str] = []
        skipped: list[str] = []
        for title in feed_titles:
            (skipped if self.should_skip_feed(title) else to_fetch).append(title)
        return to_fetch, skipped

    # --- Resets ---

    def reset_failure_count(self, feed_title: str) -> None:
        """Set the feed's failure count to 0. Load time is kept."""
        with self._lock:
            self._failure_counts[feed_title] = 0
            self._save_failure_counts()

    def reset_all(self) -> None:
        """Set every known feed's failure count to 0."""
        with self._lock:
            for title in self._failure_counts:
                self._failure_counts[title] = 0
            self._save_failure_counts()

    def reset_skipped(self) -> list[str]:
        """Reset only feeds that would be skipped.

        Returns:
            Titles that were reset.
        """
        with self._lock:
            titles = [t for t in self._failure_counts if self.should_skip_feed(t)]
            for title in titles:
                self._failure_counts[title] = 0
            self._save_failure_counts()
            return titles

    # --- Persistence ---

    def _load_failure_counts(self) -> dict[str, int]:
        try:
            data = self.store.get(FAILED_FEEDS_KEY)
            return decode_failure_counts(data) if data is not None else {}
        except (StoreError, CodecError, OSError):
            return {}

    def _save_failure_counts(self) -> None:
        try:
            self.store.set(FAILED_FEEDS_KEY, encode_failure_counts(self._failure_counts))
        except (StoreError, CodecError, OSError):
            pass

    def _notify(self, event: LoadTimeEvent) -> None:
        for observer in list(self._observers):
            try:
                observer.on_load_time(event)
            except Exception:
                logger.exception(f"Observer {observer!r} failed for {event.feed_title}")
