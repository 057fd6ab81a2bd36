"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .journal import SQLModelJournalRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelJournalRepository",
    "SQLModelUserRepository",
]
