"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import delete
from sqlmodel import select

from ...logging_config import get_logger
from ...models.habit import Habit, HabitCompletion
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Habit]:
        """List all habits, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_at.desc(), Habit.id.desc())  # type: ignore[union-attr]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active_on(self, day: date, *, user_id: int) -> list[Habit]:
        """List habits whose start/end window contains ``day``."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .where(Habit.start_date <= day)
                .where(Habit.end_date >= day)
                .order_by(Habit.name)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        if habit.start_date > habit.end_date:
            raise ValueError("Habit start date must not be after its end date")
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            logger.info("Habit created", extra={"habit_id": habit.id, "user_id": user_id})
            return habit

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        if habit.start_date > habit.end_date:
            raise ValueError("Habit start date must not be after its end date")
        with self.session_factory() as session:
            existing = session.exec(
                select(Habit).where(Habit.id == habit.id, Habit.user_id == user_id)
            ).first()
            if existing is None:
                raise ValueError(f"Habit {habit.id} not found")
            existing.name = habit.name
            existing.description = habit.description
            existing.start_date = habit.start_date
            existing.end_date = habit.end_date
            existing.reminder_time = habit.reminder_time
            session.add(existing)
            session.commit()
            session.refresh(existing)
            session.expunge(existing)
            return existing

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit and every completion recorded for it."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return
            session.execute(
                delete(HabitCompletion)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
            )
            session.delete(habit)
            session.commit()
            logger.info("Habit deleted", extra={"habit_id": habit_id, "user_id": user_id})

    # Completion operations
    def mark_complete(self, habit_id: int, day: date, *, user_id: int) -> HabitCompletion:
        """Record a completion; repeating the same day overwrites the same row.

        Raises ``ValueError`` when ``habit_id`` does not belong to ``user_id``.
        """
        with self.session_factory() as session:
            owned = session.exec(
                select(Habit.id).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if owned is None:
                raise ValueError(f"Habit {habit_id} not found")
            existing = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completed_on == day)
            ).first()
            if existing:
                session.expunge(existing)
                return existing

            completion = HabitCompletion(user_id=user_id, habit_id=habit_id, completed_on=day)
            session.add(completion)
            session.commit()
            session.refresh(completion)
            session.expunge(completion)
            logger.debug("Completion recorded", extra={"record_key": completion.record_key})
            return completion

    def revert_completion(self, habit_id: int, day: date, *, user_id: int) -> bool:
        """Remove one day's completion."""
        with self.session_factory() as session:
            completion = session.exec(
                select(HabitCompletion)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completed_on == day)
            ).first()
            if not completion:
                return False
            session.delete(completion)
            session.commit()
            return True

    def query_completions(self, habit_id: int, *, user_id: int) -> list[date]:
        """All completion days for a habit, ascending."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletion.completed_on)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
                .order_by(HabitCompletion.completed_on)  # type: ignore[arg-type]
            )
            return list(session.exec(statement).all())

    def completed_habit_ids_on(self, day: date, *, user_id: int) -> set[int]:
        """IDs of habits completed on ``day``."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletion.habit_id)
                .where(HabitCompletion.user_id == user_id)
                .where(HabitCompletion.completed_on == day)
            )
            return set(session.exec(statement).all())
