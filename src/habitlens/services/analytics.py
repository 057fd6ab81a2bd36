"""Entry points the presentation layer calls for statistics and history."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from ..logging_config import get_logger
from .history import HistoryAggregate
from .streaks import StreakResult

if TYPE_CHECKING:  # pragma: no cover
    from ..context import AppContext

logger = get_logger(__name__)


def request_habit_statistics(
    ctx: "AppContext", user_id: int, habit_id: int, *, today: date | None = None
) -> StreakResult:
    """Streaks and completed-day count for one of the session user's habits."""

    ctx.require_session_user(user_id)
    if ctx.habit_repo.get_by_id(habit_id, user_id=user_id) is None:
        raise ValueError(f"Habit {habit_id} not found")
    return ctx.habit_service.statistics(habit_id, user_id=user_id, today=today)


def request_history(ctx: "AppContext", user_id: int, *, now: datetime | None = None) -> HistoryAggregate:
    """Weekly chart, average mood and timeline, served through the session cache."""

    ctx.require_session_user(user_id)
    if ctx.history_cache is None:
        raise RuntimeError("No history cache for the active session")
    return ctx.history_cache.get_or_fetch(now)


def notify_journal_written(ctx: "AppContext", user_id: int) -> None:
    """Mark the session user's history stale after a journal write."""

    cache = ctx.history_cache
    if cache is None or cache.user_id != user_id:
        logger.debug("Journal write outside the active session", extra={"user_id": user_id})
        return
    cache.invalidate()


__all__ = ["notify_journal_written", "request_habit_statistics", "request_history"]
