#!/usr/bin/env python3
"""
FeedHealth Refresh Loop Example

Demonstrates how a feed reader's refresh loop uses the tracker:
- Skipping feeds that keep failing
- Timing each fetch and recording failures
- Logging every recorded load
- Printing the load speed table

Usage:
    python examples/01_refresh_loop.py
"""

from __future__ import annotations

import logging
import random

from rich.console import Console

from feedhealth import FeedHealthTracker, LoggingObserver, MemoryStore
from feedhealth.reporter import render_speed_table

# =============================================================================
# Simulated Fetch
# =============================================================================

FEED_LATENCY = {
    "Hacker News": 0.8,
    "Ars Technica": 14.0,
    "Dead Blog": None,
    "Daring Fireball": 2.5,
}


def fetch(title: str) -> float:
    """Pretend to fetch a feed, returning its simulated duration."""
    latency = FEED_LATENCY[title]
    if latency is None:
        raise ConnectionError(f"{title}: connection refused")
    return latency * random.uniform(0.9, 1.1)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    tracker = FeedHealthTracker(MemoryStore(), observers=[LoggingObserver(fast_level=logging.INFO)])

    for round_number in range(1, 5):
        to_fetch, skipped = tracker.partition(FEED_LATENCY)
        print(f"\nRound {round_number}: fetching {len(to_fetch)}, skipping {skipped}")
        for title in to_fetch:
            try:
                tracker.record_load_time(title, fetch(title))
            except ConnectionError:
                tracker.record_failed_feed(title)

    Console().print(render_speed_table(tracker.speed_report(), tracker.max_failures))


if __name__ == "__main__":
    main()
