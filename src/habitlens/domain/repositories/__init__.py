"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository
from .journal import JournalRepository
from .user import UserRepository

__all__ = [
    "HabitRepository",
    "JournalRepository",
    "UserRepository",
]
