"""Journal repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.journal import JournalEntry
from ...services.history import MoodRecord


class JournalRepository(Protocol):
    """Repository for journal entries and their mood projection."""

    def save_entry(self, entry: JournalEntry, *, user_id: int) -> JournalEntry:
        """Create or overwrite the entry for its day."""
        ...

    def get_entry(self, day: date, *, user_id: int) -> Optional[JournalEntry]:
        """Get the entry for one day."""
        ...

    def list_all(self, *, user_id: int) -> list[JournalEntry]:
        """All entries, newest first."""
        ...

    def delete_entry(self, day: date, *, user_id: int) -> bool:
        """Delete the entry for one day; False when there was none."""
        ...

    def query_mood_records_in_range(
        self, start_date: date, end_date: date, *, user_id: int
    ) -> list[MoodRecord]:
        """Mood records with ``start_date <= day <= end_date``, ascending."""
        ...
