"""CLI entry point."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from feedhealth.core.config import Settings, get_settings
from feedhealth.reporter.rich import format_load_time, render_speed_table
from feedhealth.reporter.simple import LoggingObserver
from feedhealth.store.factory import open_store
from feedhealth.tracker import FeedHealthTracker

app = typer.Typer(
    name="feedhealth",
    help="Inspect and manage per-feed load health",
    no_args_is_help=True,
)
console = Console()


def _tracker(ctx: typer.Context) -> FeedHealthTracker:
    settings: Settings = ctx.obj
    return FeedHealthTracker(
        open_store(settings),
        settings=settings,
        observers=[LoggingObserver(fast_level=logging.INFO)],
    )


@app.callback()
def main(
    ctx: typer.Context,
    store_path: Optional[Path] = typer.Option(None, "--store", help="Store file path"),
    backend: Optional[str] = typer.Option(None, help="Store backend: file or sqlite"),
) -> None:
    """Configure settings and logging for all commands."""
    overrides = {}
    if store_path is not None:
        overrides["store_path"] = store_path
    if backend is not None:
        overrides["store_backend"] = backend
    try:
        settings = get_settings(**overrides)
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        raise typer.BadParameter(errors, param_hint="--backend/--store") from e
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


@app.command()
def version() -> None:
    """Show version."""
    from feedhealth import __version__

    console.print(f"feedhealth {__version__}")


@app.command()
def status(ctx: typer.Context) -> None:
    """Show failure counts of all tracked feeds."""
    tracker = _tracker(ctx)
    titles = sorted(tracker.failure_counts)
    if not titles:
        console.print("No feeds tracked yet")
        return
    report = sorted(
        (tracker.health(title) for title in titles),
        key=lambda h: (not h.skipped, -h.failure_count),
    )
    console.print(render_speed_table(report, tracker.max_failures, title="Feed Health"))
    console.print(f"Slow threshold: {tracker.slow_threshold:.1f}s")


@app.command()
def record(ctx: typer.Context, feed: str, seconds: float) -> None:
    """Record a load time for FEED."""
    event = _tracker(ctx).record_load_time(feed, seconds)
    console.print(
        f"{feed}: {format_load_time(seconds)} -> {event.outcome.value} "
        f"(failures: {event.failure_count})"
    )


@app.command()
def fail(ctx: typer.Context, feed: str) -> None:
    """Record a failed load for FEED."""
    event = _tracker(ctx).record_failed_feed(feed)
    console.print(f"{feed}: failed (failures: {event.failure_count})")


@app.command()
def reset(
    ctx: typer.Context,
    feed: Optional[str] = typer.Argument(None, help="Feed to reset (default: all)"),
    skipped: bool = typer.Option(False, "--skipped", help="Reset only skipped feeds"),
) -> None:
    """Reset failure counts."""
    tracker = _tracker(ctx)
    if feed is not None:
        tracker.reset_failure_count(feed)
        console.print(f"Reset {feed}")
    elif skipped:
        titles = tracker.reset_skipped()
        console.print(f"Reset {len(titles)} skipped feed(s)")
    else:
        tracker.reset_all()
        console.print("Reset all feeds")


@app.command()
def threshold(
    ctx: typer.Context,
    seconds: Optional[float] = typer.Argument(None, help="New threshold; 0 restores the default"),
) -> None:
    """Show or set the slow-load threshold."""
    tracker = _tracker(ctx)
    if seconds is not None:
        tracker.set_slow_threshold(seconds)
    console.print(f"Slow threshold: {tracker.slow_threshold:.1f}s")


if __name__ == "__main__":
    app()
