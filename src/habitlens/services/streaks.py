"""Streak calculation over habit completion days."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from .dates import DayLike, parse_day


@dataclass(frozen=True, slots=True)
class StreakResult:
    """Current and best streak for one habit."""

    current_streak: int = 0
    best_streak: int = 0
    completed_days: int = 0


def calculate_streaks(dates: Iterable[DayLike], *, today: date | None = None) -> StreakResult:
    """Return current/best streaks for a set of completion days.

    A run only counts as the current streak while its last day is today or
    yesterday; otherwise the current streak is 0 and the run survives only as
    a candidate for the best streak. Duplicate days count once.
    """

    today = today or date.today()
    days = sorted({parse_day(value) for value in dates})
    if not days:
        return StreakResult()

    running = best = 1
    for previous, day in zip(days, days[1:]):
        if (day - previous).days == 1:
            running += 1
        else:
            running = 1
        best = max(best, running)

    current = running if days[-1] in (today, today - timedelta(days=1)) else 0
    return StreakResult(current_streak=current, best_streak=best, completed_days=len(days))


__all__ = ["StreakResult", "calculate_streaks"]
