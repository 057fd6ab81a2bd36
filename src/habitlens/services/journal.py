"""Journal write path; every write notifies listeners so caches can refresh."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Callable, Optional

from ..constants.moods import is_valid_mood
from ..logging_config import get_logger
from ..models.journal import JournalEntry

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.repositories import JournalRepository

logger = get_logger(__name__)

WriteListener = Callable[[int], None]


class JournalService:
    """Save and delete journal entries, calling ``on_write(user_id)`` afterwards."""

    def __init__(self, repo: "JournalRepository", on_write: Optional[WriteListener] = None):
        self.repo = repo
        self.on_write = on_write

    def _notify(self, user_id: int) -> None:
        if self.on_write is not None:
            self.on_write(user_id)

    def save(
        self,
        *,
        user_id: int,
        sentiment_score: int,
        entry_text: str = "",
        ai_tip: Optional[str] = None,
        day: date | None = None,
    ) -> JournalEntry:
        """Create or overwrite the journal entry for ``day`` (today by default)."""
        if not is_valid_mood(sentiment_score):
            raise ValueError(f"Sentiment score must be an integer from 1 to 5, got {sentiment_score!r}")
        entry = JournalEntry(
            user_id=user_id,
            journal_date=day or date.today(),
            entry_text=entry_text,
            sentiment_score=sentiment_score,
            ai_tip=ai_tip,
        )
        saved = self.repo.save_entry(entry, user_id=user_id)
        self._notify(user_id)
        return saved

    def delete(self, day: date, *, user_id: int) -> bool:
        """Delete the entry for ``day``; listeners fire only when something was removed."""
        removed = self.repo.delete_entry(day, user_id=user_id)
        if removed:
            self._notify(user_id)
        else:
            logger.debug("No journal entry to delete", extra={"user_id": user_id, "day": day})
        return removed


__all__ = ["JournalService", "WriteListener"]
