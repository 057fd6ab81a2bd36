"""SQLModel table exports."""

from .habit import Habit, HabitCompletion
from .journal import JournalEntry
from .user import User

__all__ = [
    "Habit",
    "HabitCompletion",
    "JournalEntry",
    "User",
]
