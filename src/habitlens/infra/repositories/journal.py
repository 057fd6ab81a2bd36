"""SQLModel implementation of Journal repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import select

from ...constants.moods import is_valid_mood
from ...logging_config import get_logger
from ...models.journal import JournalEntry
from ...services.history import MoodRecord
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelJournalRepository:
    """SQLModel-based journal repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def save_entry(self, entry: JournalEntry, *, user_id: int) -> JournalEntry:
        """Create or overwrite the entry for ``entry.journal_date``.

        Overwrites merge: an empty ``entry_text`` or a missing ``ai_tip`` keeps
        the stored value.
        """
        if not is_valid_mood(entry.sentiment_score):
            raise ValueError(
                f"Sentiment score must be an integer from 1 to 5, got {entry.sentiment_score!r}"
            )
        with self.session_factory() as session:
            existing = session.exec(
                select(JournalEntry)
                .where(JournalEntry.user_id == user_id)
                .where(JournalEntry.journal_date == entry.journal_date)
            ).first()

            if existing:
                existing.sentiment_score = entry.sentiment_score
                if entry.entry_text:
                    existing.entry_text = entry.entry_text
                if entry.ai_tip is not None:
                    existing.ai_tip = entry.ai_tip
                existing.updated_at = datetime.now(timezone.utc)
                target = existing
            else:
                entry.user_id = user_id
                target = entry

            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            logger.info(
                "Journal entry saved",
                extra={"record_key": target.record_key, "overwrite": existing is not None},
            )
            return target

    def get_entry(self, day: date, *, user_id: int) -> Optional[JournalEntry]:
        """Get the entry for one day."""
        with self.session_factory() as session:
            obj = session.exec(
                select(JournalEntry)
                .where(JournalEntry.user_id == user_id)
                .where(JournalEntry.journal_date == day)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[JournalEntry]:
        """All entries, newest first."""
        with self.session_factory() as session:
            statement = (
                select(JournalEntry)
                .where(JournalEntry.user_id == user_id)
                .order_by(JournalEntry.journal_date.desc())  # type: ignore[attr-defined]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def delete_entry(self, day: date, *, user_id: int) -> bool:
        """Delete the entry for one day."""
        with self.session_factory() as session:
            entry = session.exec(
                select(JournalEntry)
                .where(JournalEntry.user_id == user_id)
                .where(JournalEntry.journal_date == day)
            ).first()
            if not entry:
                return False
            session.delete(entry)
            session.commit()
            return True

    def query_mood_records_in_range(
        self, start_date: date, end_date: date, *, user_id: int
    ) -> list[MoodRecord]:
        """Mood records inside the inclusive window, ascending by day."""
        with self.session_factory() as session:
            statement = (
                select(JournalEntry.journal_date, JournalEntry.sentiment_score)
                .where(JournalEntry.user_id == user_id)
                .where(JournalEntry.journal_date >= start_date)
                .where(JournalEntry.journal_date <= end_date)
                .order_by(JournalEntry.journal_date)  # type: ignore[arg-type]
            )
            return [MoodRecord(day=day, score=score) for day, score in session.exec(statement).all()]
