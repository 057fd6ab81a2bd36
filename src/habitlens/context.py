"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelHabitRepository,
    SQLModelJournalRepository,
    SQLModelUserRepository,
)
from .logging_config import get_logger
from .models.user import User
from .services.analytics import notify_journal_written
from .services.habits import HabitService
from .services.history_cache import HistoryCache
from .services.journal import JournalService

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Centralized application context with repositories and session state."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    user_repo: SQLModelUserRepository
    habit_repo: SQLModelHabitRepository
    journal_repo: SQLModelJournalRepository

    habit_service: HabitService
    journal_service: JournalService

    current_user: Optional[User] = None
    # Lives exactly as long as the login session
    history_cache: Optional[HistoryCache] = None

    def require_user_id(self) -> int:
        """Return the current user id or raise if not set."""

        if self.current_user is None or self.current_user.id is None:
            raise RuntimeError("User is not authenticated")
        return self.current_user.id

    def require_session_user(self, user_id: int) -> int:
        """Return ``user_id`` if it is the logged-in user, else raise."""

        current = self.require_user_id()
        if user_id != current:
            raise RuntimeError(f"User {user_id} does not own the active session")
        return current

    def login(self, user: User) -> None:
        """Start a session for ``user`` with a fresh history cache."""

        if user.id is None:
            raise ValueError("Cannot start a session for an unsaved user")
        if self.current_user is not None:
            self.logout()
        self.current_user = user
        self.history_cache = HistoryCache(
            self.journal_repo,
            user_id=user.id,
            ttl=self.config.history_cache_ttl,
            timeline_days=self.config.TIMELINE_WINDOW_DAYS,
        )
        logger.info("Session started", extra={"user_id": user.id})

    def logout(self) -> None:
        """End the session and tear down the history cache."""

        if self.history_cache is not None:
            self.history_cache.close()
        if self.current_user is not None:
            logger.info("Session ended", extra={"user_id": self.current_user.id})
        self.history_cache = None
        self.current_user = None

    def close(self) -> None:
        """Log out and release database connections."""

        self.logout()
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    user_repo = SQLModelUserRepository(session_factory)
    habit_repo = SQLModelHabitRepository(session_factory)
    journal_repo = SQLModelJournalRepository(session_factory)

    ctx = AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        user_repo=user_repo,
        habit_repo=habit_repo,
        journal_repo=journal_repo,
        habit_service=HabitService(habit_repo),
        journal_service=JournalService(journal_repo),
    )
    # Journal writes invalidate the logged-in user's history cache
    ctx.journal_service.on_write = lambda user_id: notify_journal_written(ctx, user_id)
    return ctx
