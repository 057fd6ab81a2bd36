"""Command-line interface for HabitLens."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .constants.moods import mood_label
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.habit import Habit
from .services.analytics import request_habit_statistics, request_history
from .services.history_cache import HistoryFetchError
from .services.reports import history_chart_png

_DAY = click.DateTime(formats=["%Y-%m-%d"])


def _as_day(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _session(ctx: click.Context, username: str) -> AppContext:
    """Return the app context logged in as ``username``."""

    app: AppContext = ctx.obj["app"]
    user = app.user_repo.get_or_create(username)
    app.login(user)
    return app


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track habits and journal moods."""

    ctx.ensure_object(dict)
    config: BaseConfig = ctx.obj.get("config") or BaseConfig()
    setup_logging(config)
    app = create_app_context(config)
    ctx.obj["app"] = app
    ctx.call_on_close(app.close)


@cli.command("init-db")
@click.pass_obj
def init_db(obj: dict) -> None:
    """Create the database schema."""

    click.echo(f"Database ready: {obj['app'].config.DATABASE_URL}")


@cli.command("add-habit")
@click.argument("username")
@click.argument("name")
@click.option("--description", default="", help="Free-text description")
@click.option("--start", "start", type=_DAY, default=None, help="First day (YYYY-MM-DD), default today")
@click.option("--end", "end", type=_DAY, default=None, help="Last day (YYYY-MM-DD), default open-ended")
@click.pass_context
def add_habit(ctx: click.Context, username: str, name: str, description: str, start, end) -> None:
    """Create a habit for USERNAME."""

    app = _session(ctx, username)
    habit = Habit(user_id=app.require_user_id(), name=name, description=description)
    if start is not None:
        habit.start_date = start.date()
    if end is not None:
        habit.end_date = end.date()
    try:
        habit = app.habit_repo.create(habit, user_id=app.require_user_id())
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    click.echo(f"Created habit {habit.id}: {habit.name}")


@cli.command()
@click.argument("username")
@click.argument("habit_id", type=int)
@click.option("--date", "day", type=_DAY, default=None, help="Day to mark (YYYY-MM-DD), default today")
@click.pass_context
def complete(ctx: click.Context, username: str, habit_id: int, day) -> None:
    """Mark HABIT_ID done for a day."""

    app = _session(ctx, username)
    try:
        record = app.habit_service.complete(habit_id, user_id=app.require_user_id(), day=_as_day(day))
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Completed {record.record_key}")


@cli.command()
@click.argument("username")
@click.option("--date", "day", type=_DAY, default=None, help="Day to report (YYYY-MM-DD), default today")
@click.pass_context
def today(ctx: click.Context, username: str, day) -> None:
    """Show which habits are still open for a day."""

    app = _session(ctx, username)
    progress = app.habit_service.daily_progress(user_id=app.require_user_id(), day=_as_day(day))
    click.echo(f"{progress.completed}/{progress.active} habits done on {progress.day.isoformat()}")
    for habit in progress.remaining:
        click.echo(f"  [ ] {habit.id}: {habit.name}")
    if progress.all_done:
        click.echo("All habits for today are complete. Keep it up!")


@cli.command()
@click.argument("username")
@click.argument("habit_id", type=int)
@click.pass_context
def stats(ctx: click.Context, username: str, habit_id: int) -> None:
    """Show streaks for HABIT_ID."""

    app = _session(ctx, username)
    try:
        result = request_habit_statistics(app, app.require_user_id(), habit_id)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Current streak: {result.current_streak}")
    click.echo(f"Best streak: {result.best_streak}")
    click.echo(f"Completed days: {result.completed_days}")


@cli.command()
@click.argument("username")
@click.argument("score", type=click.IntRange(1, 5))
@click.option("--text", default="", help="Journal text")
@click.option("--tip", default=None, help="Suggestion to store with the entry")
@click.option("--date", "day", type=_DAY, default=None, help="Journal day (YYYY-MM-DD), default today")
@click.pass_context
def journal(ctx: click.Context, username: str, score: int, text: str, tip: Optional[str], day) -> None:
    """Save the journal entry (mood SCORE 1-5) for a day."""

    app = _session(ctx, username)
    entry = app.journal_service.save(
        user_id=app.require_user_id(),
        sentiment_score=score,
        entry_text=text,
        ai_tip=tip,
        day=_as_day(day),
    )
    click.echo(f"Saved {entry.record_key} ({mood_label(entry.sentiment_score)})")


@cli.command()
@click.argument("username")
@click.option("--chart", "chart", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the mood chart PNG to this path")
@click.pass_context
def history(ctx: click.Context, username: str, chart: Optional[Path]) -> None:
    """Show the last 7 days of moods and the average."""

    app = _session(ctx, username)
    try:
        aggregate = request_history(app, app.require_user_id())
    except HistoryFetchError as exc:
        raise click.ClickException(str(exc)) from exc

    for point in aggregate.chart_series:
        click.echo(f"{point.day_label} {point.day.isoformat()}  {mood_label(point.value or None)}")
    if aggregate.average_mood is None:
        click.echo("Average mood: no entries")
    else:
        click.echo(f"Average mood: {aggregate.average_mood:.2f}")
    logged = sum(1 for point in aggregate.timeline_series if point.value is not None)
    click.echo(f"Entries in the last {len(aggregate.timeline_series)} days: {logged}")

    if chart is not None:
        path = history_chart_png(aggregate, chart)
        click.echo(f"Chart written: {path}")


def main() -> None:
    """Console-script entry point."""

    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
