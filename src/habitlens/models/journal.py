"""Journal entries carrying the day's sentiment score."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class JournalEntry(SQLModel, table=True):
    """One journal entry per user per calendar day."""

    __tablename__: ClassVar[str] = "journal_entry"

    user_id: int = Field(foreign_key="user.id", primary_key=True)
    journal_date: date = Field(primary_key=True, index=True)
    entry_text: str = Field(default="")
    # 1 = very positive ... 5 = very negative
    sentiment_score: int = Field(nullable=False)
    ai_tip: Optional[str] = Field(default=None)
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def record_key(self) -> str:
        """Document-store style key ``<user_id>_<YYYY-MM-DD>``."""

        return f"{self.user_id}_{self.journal_date.isoformat()}"
