"""Tests for FeedHealthTracker.

Tests cover:
- Defaults for unrecorded feeds
- Fast / slow / failed classification
- Failure count capping rules
- Skip and slow queries
- Resets
- Persistence and best-effort failure handling
- Threshold override
- Observers
- Reports and batch helpers
"""

import logging
import threading

import pytest

from feedhealth.core.config import get_settings
from feedhealth.core.exceptions import StoreError
from feedhealth.models.health import LoadOutcome
from feedhealth.protocols.observer import CallbackObserver
from feedhealth.store.file import JsonFileStore
from feedhealth.store.memory import MemoryStore
from feedhealth.tracker import (
    FAILED_FEEDS_KEY,
    SLOW_THRESHOLD_KEY,
    FeedHealthTracker,
)

# =============================================================================
# Fixtures
# =============================================================================


class BrokenStore:
    """Store whose writes always fail."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self._data = dict(initial or {})
        self.write_attempts = 0

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.write_attempts += 1
        raise StoreError("disk full")


class UnreachableStore:
    """Store whose reads and writes fail at the OS level."""

    def get(self, key: str) -> bytes | None:
        raise PermissionError(f"cannot read {key}")

    def set(self, key: str, value: bytes) -> None:
        raise OSError("read-only file system")


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def tracker(store: MemoryStore) -> FeedHealthTracker:
    return FeedHealthTracker(store, settings=get_settings(store_backend="memory"))


# =============================================================================
# Unrecorded Feeds
# =============================================================================


class TestUnrecordedFeed:
    """Tests for feeds never recorded."""

    def test_load_time_is_zero(self, tracker):
        assert tracker.get_load_time("unknown") == 0

    def test_failure_count_is_zero(self, tracker):
        assert tracker.get_failure_count("unknown") == 0

    def test_not_skipped(self, tracker):
        assert tracker.should_skip_feed("unknown") is False

    def test_not_slow(self, tracker):
        assert tracker.is_feed_slow("unknown") is False

    def test_empty_maps(self, tracker):
        assert tracker.load_times == {}
        assert tracker.failure_counts == {}


# =============================================================================
# Classification
# =============================================================================


class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize(
        ("duration", "expected"),
        [
            (0.0, LoadOutcome.FAST),
            (10.0, LoadOutcome.FAST),
            (10.01, LoadOutcome.SLOW),
            (44.99, LoadOutcome.SLOW),
            (45.0, LoadOutcome.FAILED),
            (1e9, LoadOutcome.FAILED),
            (-1.0, LoadOutcome.FAILED),
            (-0.001, LoadOutcome.FAILED),
        ],
    )
    def test_boundaries(self, tracker, duration, expected):
        """Threshold is exclusive, cutoff is inclusive, negatives fail."""
        assert tracker.classify(duration) is expected

    def test_classify_does_not_record(self, tracker):
        tracker.classify(50.0)

        assert tracker.get_failure_count("any") == 0
        assert tracker.load_times == {}


# =============================================================================
# Recording
# =============================================================================


class TestRecordLoadTime:
    """Tests for record_load_time."""

    def test_stores_load_time(self, tracker):
        tracker.record_load_time("A", 3.5)

        assert tracker.get_load_time("A") == 3.5

    def test_overwrites_load_time(self, tracker):
        tracker.record_load_time("A", 3.5)
        tracker.record_load_time("A", 7.0)

        assert tracker.get_load_time("A") == 7.0

    def test_fast_load_resets_count(self, tracker):
        """Fast load resets regardless of prior count."""
        for _ in range(5):
            tracker.record_failed_feed("A")

        tracker.record_load_time("A", 2.0)

        assert tracker.get_failure_count("A") == 0

    def test_fast_load_creates_zero_entry(self, tracker):
        tracker.record_load_time("A", 1.0)

        assert tracker.failure_counts == {"A": 0}

    def test_slow_load_initializes_to_one(self, tracker):
        tracker.record_load_time("A", 12.0)

        assert tracker.get_failure_count("A") == 1

    def test_slow_loads_capped_at_max_failures(self, tracker):
        for _ in range(6):
            tracker.record_load_time("A", 12.0)

        assert tracker.get_failure_count("A") == 3

    def test_slow_load_does_not_lower_count_above_cap(self, tracker):
        for _ in range(5):
            tracker.record_failed_feed("A")

        tracker.record_load_time("A", 12.0)

        assert tracker.get_failure_count("A") == 5

    def test_hard_failures_uncapped(self, tracker):
        for _ in range(7):
            tracker.record_load_time("A", 60.0)

        assert tracker.get_failure_count("A") == 7

    def test_record_failed_feed_uses_negative_sentinel(self, tracker):
        tracker.record_failed_feed("A")

        assert tracker.get_load_time("A") == -1
        assert tracker.get_failure_count("A") == 1

    def test_returns_event(self, tracker):
        event = tracker.record_load_time("A", 12.0)

        assert event.feed_title == "A"
        assert event.load_time == 12.0
        assert event.outcome is LoadOutcome.SLOW
        assert event.failure_count == 1
        assert event.to_payload() == {"feedTitle": "A", "loadTime": 12.0}

    def test_feeds_are_independent(self, tracker):
        tracker.record_failed_feed("A")
        tracker.record_load_time("B", 1.0)

        assert tracker.get_failure_count("A") == 1
        assert tracker.get_failure_count("B") == 0

    def test_progression_scenario(self, tracker):
        """[5, 12, 12, 12, 50] counts 0, 1, 2, 3, 4; skipped from the 3rd slow load."""
        counts = []
        skipped = []
        for duration in [5, 12, 12, 12, 50]:
            tracker.record_load_time("A", duration)
            counts.append(tracker.get_failure_count("A"))
            skipped.append(tracker.should_skip_feed("A"))

        assert counts == [0, 1, 2, 3, 4]
        assert skipped == [False, False, False, True, True]


class TestTimed:
    """Tests for the timed context manager."""

    def test_records_elapsed_time(self, tracker):
        with tracker.timed("A"):
            pass

        assert 0 <= tracker.get_load_time("A") < 1.0
        assert tracker.get_failure_count("A") == 0

    def test_exception_records_failure_and_reraises(self, tracker):
        with pytest.raises(ValueError, match="bad xml"):
            with tracker.timed("A"):
                raise ValueError("bad xml")

        assert tracker.get_load_time("A") == -1
        assert tracker.get_failure_count("A") == 1


# =============================================================================
# Queries
# =============================================================================


class TestShouldSkipFeed:
    """Tests for should_skip_feed."""

    def test_true_at_max_failures(self, tracker):
        for _ in range(2):
            tracker.record_failed_feed("A")
        assert tracker.should_skip_feed("A") is False

        tracker.record_failed_feed("A")
        assert tracker.should_skip_feed("A") is True

    def test_stays_true_after_more_failures(self, tracker):
        for _ in range(6):
            tracker.record_failed_feed("A")

        assert tracker.should_skip_feed("A") is True

    def test_respects_configured_max_failures(self, store):
        tracker = FeedHealthTracker(store, settings=get_settings(max_failures=5))
        for _ in range(4):
            tracker.record_failed_feed("A")

        assert tracker.max_failures == 5
        assert tracker.should_skip_feed("A") is False


class TestIsFeedSlow:
    """Tests for is_feed_slow."""

    def test_slow_after_over_threshold_load(self, tracker):
        tracker.record_load_time("A", 12.0)

        assert tracker.is_feed_slow("A") is True

    def test_not_slow_at_threshold(self, tracker):
        tracker.record_load_time("A", 10.0)

        assert tracker.is_feed_slow("A") is False

    def test_never_slow_after_explicit_failure(self, tracker):
        tracker.record_load_time("A", 12.0)
        tracker.record_failed_feed("A")

        assert tracker.is_feed_slow("A") is False

    def test_excessive_duration_is_slow(self, tracker):
        """A 50s load is a hard failure but still a positive, slow duration."""
        tracker.record_load_time("A", 50.0)

        assert tracker.is_feed_slow("A") is True


class TestPerformanceScore:
    """Tests for performance_score."""

    @pytest.mark.parametrize(
        ("durations", "expected"),
        [
            ([1.0], 10),
            ([3.0], 8),
            ([6.0], 5),
            ([12.0], 2),
            ([-1.0], 7),
            ([-1.0, -1.0, -1.0, -1.0], 0),
        ],
    )
    def test_scores(self, tracker, durations, expected):
        for duration in durations:
            tracker.record_load_time("A", duration)

        assert tracker.performance_score("A") == expected

    def test_unrecorded_feed_scores_ten(self, tracker):
        assert tracker.performance_score("unknown") == 10


# =============================================================================
# Resets
# =============================================================================


class TestResets:
    """Tests for reset operations."""

    def test_reset_failure_count(self, tracker):
        for _ in range(4):
            tracker.record_failed_feed("A")

        tracker.reset_failure_count("A")

        assert tracker.get_failure_count("A") == 0
        assert tracker.should_skip_feed("A") is False

    def test_reset_keeps_load_time(self, tracker):
        tracker.record_load_time("A", 12.0)

        tracker.reset_failure_count("A")

        assert tracker.get_load_time("A") == 12.0

    def test_reset_unknown_feed_creates_zero_entry(self, tracker):
        tracker.reset_failure_count("new")

        assert tracker.failure_counts == {"new": 0}

    def test_count_climbs_back_after_reset(self, tracker):
        for _ in range(3):
            tracker.record_failed_feed("A")
        tracker.reset_failure_count("A")

        tracker.record_failed_feed("A")
        tracker.record_failed_feed("A")
        assert tracker.should_skip_feed("A") is False
        tracker.record_failed_feed("A")
        assert tracker.should_skip_feed("A") is True

    def test_reset_all(self, tracker):
        tracker.record_failed_feed("A")
        tracker.record_load_time("B", 12.0)

        tracker.reset_all()

        assert tracker.failure_counts == {"A": 0, "B": 0}

    def test_reset_skipped_only_resets_skipped(self, tracker):
        for _ in range(3):
            tracker.record_failed_feed("A")
        tracker.record_failed_feed("B")

        reset = tracker.reset_skipped()

        assert reset == ["A"]
        assert tracker.get_failure_count("A") == 0
        assert tracker.get_failure_count("B") == 1


# =============================================================================
# Persistence
# =============================================================================


class TestPersistence:
    """Tests for failure count persistence."""

    def test_counts_written_after_record(self, tracker, store):
        tracker.record_load_time("A", 12.0)

        assert store.get(FAILED_FEEDS_KEY) == b'{"A":1}'

    def test_counts_round_trip(self, tracker, store):
        tracker.record_failed_feed("A")
        tracker.record_load_time("B", 12.0)
        tracker.record_load_time("C", 1.0)

        reloaded = FeedHealthTracker(store)

        assert reloaded.failure_counts == tracker.failure_counts

    def test_load_times_not_persisted(self, tracker, store):
        tracker.record_load_time("A", 3.0)

        reloaded = FeedHealthTracker(store)

        assert reloaded.get_load_time("A") == 0

    def test_reset_persisted(self, tracker, store):
        tracker.record_failed_feed("A")
        tracker.reset_failure_count("A")

        assert FeedHealthTracker(store).failure_counts == {"A": 0}

    @pytest.mark.parametrize(
        "payload",
        [b"not json", b"[1, 2]", b'{"A": "many"}', b'{"A": -2}', b""],
    )
    def test_undecodable_counts_start_empty(self, payload):
        store = MemoryStore({FAILED_FEEDS_KEY: payload})

        tracker = FeedHealthTracker(store)

        assert tracker.failure_counts == {}

    def test_write_failure_is_swallowed(self):
        store = BrokenStore()
        tracker = FeedHealthTracker(store)

        tracker.record_failed_feed("A")
        tracker.reset_failure_count("B")

        assert store.write_attempts == 2
        assert tracker.get_failure_count("A") == 1
        assert store.get(FAILED_FEEDS_KEY) is None

    def test_os_errors_are_swallowed(self):
        tracker = FeedHealthTracker(UnreachableStore())

        tracker.record_load_time("A", 12.0)
        tracker.record_failed_feed("A")
        tracker.set_slow_threshold(20.0)
        tracker.reset_skipped()

        assert tracker.get_failure_count("A") == 2
        assert tracker.slow_threshold == 10.0


# =============================================================================
# Slow Threshold
# =============================================================================


class TestSlowThreshold:
    """Tests for the slow-threshold override."""

    def test_default(self, tracker):
        assert tracker.slow_threshold == 10.0

    def test_store_override(self, store):
        store.set(SLOW_THRESHOLD_KEY, b"20")
        tracker = FeedHealthTracker(store)

        tracker.record_load_time("A", 15.0)

        assert tracker.slow_threshold == 20.0
        assert tracker.get_failure_count("A") == 0
        assert tracker.is_feed_slow("A") is False

    @pytest.mark.parametrize("payload", [b"0", b"-5", b"garbage"])
    def test_invalid_override_uses_default(self, store, payload):
        store.set(SLOW_THRESHOLD_KEY, payload)

        assert FeedHealthTracker(store).slow_threshold == 10.0

    def test_set_slow_threshold(self, tracker, store):
        tracker.set_slow_threshold(5.0)

        assert tracker.slow_threshold == 5.0
        assert tracker.classify(6.0) is LoadOutcome.SLOW

    def test_set_zero_restores_default(self, tracker):
        tracker.set_slow_threshold(5.0)
        tracker.set_slow_threshold(0)

        assert tracker.slow_threshold == 10.0

    def test_override_read_on_every_access(self, tracker, store):
        store.set(SLOW_THRESHOLD_KEY, b"30")

        assert tracker.slow_threshold == 30.0

    def test_settings_default(self, store):
        tracker = FeedHealthTracker(store, settings=get_settings(default_slow_threshold=2.5))

        assert tracker.slow_threshold == 2.5


# =============================================================================
# Observers
# =============================================================================


class TestObservers:
    """Tests for observer notification."""

    def test_observer_receives_events_in_order(self, store):
        events = []
        tracker = FeedHealthTracker(store, observers=[CallbackObserver(events.append)])

        tracker.record_load_time("A", 1.0)
        tracker.record_failed_feed("A")
        tracker.record_load_time("B", 12.0)

        assert [(e.feed_title, e.load_time) for e in events] == [
            ("A", 1.0),
            ("A", -1),
            ("B", 12.0),
        ]

    def test_event_sees_updated_state(self, store):
        seen = []
        tracker = FeedHealthTracker(store)
        tracker.subscribe(CallbackObserver(lambda e: seen.append(tracker.get_failure_count(e.feed_title))))

        tracker.record_failed_feed("A")

        assert seen == [1]

    def test_unsubscribe(self, tracker):
        events = []
        observer = CallbackObserver(events.append)
        tracker.subscribe(observer)
        tracker.unsubscribe(observer)

        tracker.record_load_time("A", 1.0)

        assert events == []

    def test_unsubscribe_unknown_is_ignored(self, tracker):
        tracker.unsubscribe(CallbackObserver(print))

    def test_resets_do_not_notify(self, tracker):
        events = []
        tracker.subscribe(CallbackObserver(events.append))

        tracker.reset_failure_count("A")
        tracker.reset_all()

        assert events == []

    def test_failing_observer_is_logged_and_skipped(self, tracker, caplog):
        def explode(event):
            raise RuntimeError("boom")

        events = []
        tracker.subscribe(CallbackObserver(explode))
        tracker.subscribe(CallbackObserver(events.append))

        with caplog.at_level(logging.ERROR, logger="feedhealth.tracker"):
            tracker.record_load_time("A", 1.0)

        assert len(events) == 1
        assert tracker.get_load_time("A") == 1.0
        assert "boom" in caplog.text


# =============================================================================
# Reports
# =============================================================================


class TestReports:
    """Tests for health snapshots and batch helpers."""

    def test_health_snapshot(self, tracker):
        tracker.record_load_time("A", 12.0)

        health = tracker.health("A")

        assert health.title == "A"
        assert health.load_time == 12.0
        assert health.failure_count == 1
        assert health.skipped is False
        assert health.slow is True
        assert health.status == "SLOW"

    def test_speed_report_order(self, tracker):
        tracker.record_load_time("fast", 1.0)
        tracker.record_load_time("slow", 20.0)
        for _ in range(3):
            tracker.record_failed_feed("dead")

        titles = [h.title for h in tracker.speed_report()]

        assert titles == ["dead", "slow", "fast"]

    def test_speed_report_only_includes_recorded_loads(self, store):
        FeedHealthTracker(store).record_failed_feed("old")

        assert FeedHealthTracker(store).speed_report() == []

    def test_problem_feeds(self, tracker):
        tracker.record_failed_feed("A")
        tracker.record_load_time("B", 1.0)
        for _ in range(3):
            tracker.record_failed_feed("C")

        assert tracker.problem_feeds(["C", "B", "A", "D"]) == ["C", "A"]

    def test_partition(self, tracker):
        for _ in range(3):
            tracker.record_failed_feed("B")

        to_fetch, skipped = tracker.partition(["A", "B", "C"])

        assert to_fetch == ["A", "C"]
        assert skipped == ["B"]

    def test_snapshots_are_copies(self, tracker):
        tracker.record_load_time("A", 1.0)

        tracker.load_times["A"] = 99.0
        tracker.failure_counts["A"] = 99

        assert tracker.get_load_time("A") == 1.0
        assert tracker.get_failure_count("A") == 0


# =============================================================================
# Concurrency
# =============================================================================


class TestConcurrency:
    """Tests for sharing one tracker between threads."""

    THREADS = 8
    CALLS = 200

    def _hammer(self, target) -> None:
        barrier = threading.Barrier(self.THREADS)

        def worker():
            barrier.wait()
            for _ in range(self.CALLS):
                target()

        threads = [threading.Thread(target=worker) for _ in range(self.THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def test_concurrent_failures_are_all_counted(self, tmp_path):
        """No increment is lost and the persisted count matches memory."""
        path = tmp_path / "health.json"
        tracker = FeedHealthTracker(JsonFileStore(path))

        self._hammer(lambda: tracker.record_failed_feed("A"))

        expected = self.THREADS * self.CALLS
        assert tracker.get_failure_count("A") == expected
        assert FeedHealthTracker(JsonFileStore(path)).get_failure_count("A") == expected

    def test_concurrent_feeds_persist_together(self, store):
        """Writers on different feeds never overwrite each other's counts."""
        tracker = FeedHealthTracker(store)
        titles = iter(f"feed-{i}" for i in range(self.THREADS))
        lock = threading.Lock()
        assigned = threading.local()

        def record():
            if not hasattr(assigned, "title"):
                with lock:
                    assigned.title = next(titles)
            tracker.record_failed_feed(assigned.title)

        self._hammer(record)

        reloaded = FeedHealthTracker(store).failure_counts
        assert reloaded == {f"feed-{i}": self.CALLS for i in range(self.THREADS)}
