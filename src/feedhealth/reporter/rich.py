"""Rich table of feed load speeds.

Usage:
    from rich.console import Console
    from feedhealth.reporter.rich import render_speed_table

    console = Console()
    console.print(render_speed_table(tracker.speed_report(), tracker.max_failures))

    # Output:
    # ┏━━━━━━━━━━━━━━┳━━━━━━━━━┳━━━━━━━━━━━┳━━━━━━━━━━┳━━━━━━━┓
    # ┃ Feed         ┃ Status  ┃ Load time ┃ Failures ┃ Score ┃
    # ┡━━━━━━━━━━━━━━╇━━━━━━━━━╇━━━━━━━━━━━╇━━━━━━━━━━╇━━━━━━━┩
    # │ Dead Blog    │ SKIPPED │ failed    │ 3/3      │ 1     │
    # │ Ars Technica │ SLOW    │ 14.8s     │ 1/3      │ 2     │
    # │ Hacker News  │ OK      │ 1.2s      │ 0/3      │ 10    │
    # └──────────────┴─────────┴───────────┴──────────┴───────┘
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.table import Table

from feedhealth.models.health import FeedHealth

STATUS_STYLES = {
    "SKIPPED": "bold red",
    "SLOW": "yellow",
    "FAILED": "red",
    "OK": "green",
}


def format_load_time(load_time: float) -> str:
    """Human-readable load time; negative durations are explicit failures."""
    if load_time < 0:
        return "failed"
    return f"{load_time:.1f}s"


def render_speed_table(
    report: Iterable[FeedHealth],
    max_failures: int,
    title: str = "Feed Loading Speeds",
) -> Table:
    """Build a table with one row per feed, in report order.

    Args:
        report: Feed health snapshots (see ``FeedHealthTracker.speed_report``)
        max_failures: Failure count at which feeds are skipped
        title: Table title
    """
    table = Table(title=title)
    table.add_column("Feed", style="bold")
    table.add_column("Status")
    table.add_column("Load time", justify="right")
    table.add_column("Failures", justify="right")
    table.add_column("Score", justify="right")

    for health in report:
        status = health.status
        table.add_row(
            health.title,
            f"[{STATUS_STYLES[status]}]{status}[/]",
            format_load_time(health.load_time),
            f"{health.failure_count}/{max_failures}",
            str(health.score),
        )
    return table
