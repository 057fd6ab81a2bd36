"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitCompletion


class HabitRepository(Protocol):
    """Repository for habits and their completion records."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List all habits of a user."""
        ...

    def list_active_on(self, day: date, *, user_id: int) -> list[Habit]:
        """List habits whose start/end window contains ``day``."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit together with its completions."""
        ...

    def mark_complete(self, habit_id: int, day: date, *, user_id: int) -> HabitCompletion:
        """Record a completion; repeating the same day is a no-op overwrite.

        Raises ValueError when the habit does not belong to ``user_id``.
        """
        ...

    def revert_completion(self, habit_id: int, day: date, *, user_id: int) -> bool:
        """Remove one day's completion; False when there was none."""
        ...

    def query_completions(self, habit_id: int, *, user_id: int) -> list[date]:
        """All completion days for a habit, ascending."""
        ...

    def completed_habit_ids_on(self, day: date, *, user_id: int) -> set[int]:
        """IDs of habits completed on ``day``."""
        ...
