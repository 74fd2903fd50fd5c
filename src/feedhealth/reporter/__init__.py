"""Feed health reporting.

Usage:
    from feedhealth.reporter import LoggingObserver, render_speed_table

    # Log every recorded load
    tracker.subscribe(LoggingObserver())

    # Terminal table of load speeds
    console.print(render_speed_table(tracker.speed_report(), tracker.max_failures))
"""

from feedhealth.reporter.rich import render_speed_table
from feedhealth.reporter.simple import LoggingObserver

__all__ = [
    "LoggingObserver",
    "render_speed_table",
]
