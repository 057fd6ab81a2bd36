"""Habit service helpers for daily progress, completions and statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Iterable

from ..logging_config import get_logger
from ..models.habit import Habit, HabitCompletion
from .streaks import StreakResult, calculate_streaks

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import HabitRepository

logger = get_logger(__name__)


def is_active_on(habit: Habit, day: date) -> bool:
    """Return True when ``day`` falls inside the habit's start/end window."""

    return habit.start_date <= day <= habit.end_date


def remaining_habits(habits: Iterable[Habit], completed_ids: Iterable[int], day: date) -> list[Habit]:
    """Habits active on ``day`` that have not been completed yet."""

    done = set(completed_ids)
    return [habit for habit in habits if is_active_on(habit, day) and habit.id not in done]


@dataclass(frozen=True, slots=True)
class DailyProgress:
    """Completion tally for one day."""

    day: date
    completed: int
    active: int
    remaining: tuple[Habit, ...]

    @property
    def all_done(self) -> bool:
        return self.active > 0 and self.completed >= self.active


class HabitService:
    """Habit write paths and per-habit statistics for one repository."""

    def __init__(self, repo: "HabitRepository"):
        self.repo = repo

    def complete(self, habit_id: int, *, user_id: int, day: date | None = None) -> HabitCompletion:
        """Mark ``habit_id`` done for ``day`` (today by default)."""
        day = day or date.today()
        habit = self.repo.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise ValueError(f"Habit {habit_id} not found")
        if not is_active_on(habit, day):
            raise ValueError(f"Habit {habit_id} is not scheduled on {day.isoformat()}")
        return self.repo.mark_complete(habit_id, day, user_id=user_id)

    def revert(self, habit_id: int, *, user_id: int, day: date | None = None) -> bool:
        """Undo the completion of ``habit_id`` on ``day``."""
        return self.repo.revert_completion(habit_id, day or date.today(), user_id=user_id)

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit with all of its completions."""
        self.repo.delete(habit_id, user_id=user_id)

    def statistics(self, habit_id: int, *, user_id: int, today: date | None = None) -> StreakResult:
        """Current/best streak and completed-day count for one habit."""
        days = self.repo.query_completions(habit_id, user_id=user_id)
        result = calculate_streaks(days, today=today)
        logger.debug(
            "Habit statistics computed",
            extra={"habit_id": habit_id, "current": result.current_streak, "best": result.best_streak},
        )
        return result

    def daily_progress(self, *, user_id: int, day: date | None = None) -> DailyProgress:
        """Active habits for ``day`` and how many are already done."""
        day = day or date.today()
        active = self.repo.list_active_on(day, user_id=user_id)
        completed_ids = self.repo.completed_habit_ids_on(day, user_id=user_id)
        remaining = remaining_habits(active, completed_ids, day)
        return DailyProgress(
            day=day,
            completed=len(active) - len(remaining),
            active=len(active),
            remaining=tuple(remaining),
        )


__all__ = ["DailyProgress", "HabitService", "is_active_on", "remaining_habits"]
