"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Habit(SQLModel, table=True):
    """A user-defined habit tracked daily between its start and end dates."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    start_date: date = Field(default_factory=date.today, nullable=False)
    end_date: date = Field(default=date.max, nullable=False)
    reminder_time: Optional[str] = Field(default=None, max_length=8)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    completions: list["HabitCompletion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship("HabitCompletion", back_populates="habit"),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class HabitCompletion(SQLModel, table=True):
    """Evidence that a habit was performed on a calendar day.

    The composite primary key allows one row per (habit, day); marking the
    same day twice overwrites instead of duplicating.
    """

    __tablename__: ClassVar[str] = "habit_completion"

    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    completed_on: date = Field(primary_key=True, index=True)

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )

    @property
    def record_key(self) -> str:
        """Document-store style key ``<habit_id>_<YYYY-MM-DD>``."""

        return f"{self.habit_id}_{self.completed_on.isoformat()}"
