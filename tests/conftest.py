"""Pytest configuration and shared fixtures for HabitLens tests.

This module provides database fixtures and test data factories for testing
analytics, repositories and services without touching the real app database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine, select

# Import all models to ensure they're registered with SQLModel metadata
from habitlens.models import Habit, HabitCompletion, JournalEntry, User

# Fixed reference day for tests that pin "today"
TODAY = date(2024, 3, 15)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test.

    Yields:
        Session: SQLModel session for test
    """
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Create a session factory for repositories that expect Callable[[], Session].

    Returns:
        Callable: Factory function that returns session context managers
    """

    def factory():
        """Create a new Session with expire_on_commit disabled."""
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(db_session) -> User:
    """Create a default user for scoping data."""

    existing = db_session.exec(select(User).where(User.username == "tester")).first()
    if existing:
        return existing
    u = User(username="tester", display_name="Tester")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def other_user(db_session) -> User:
    """A second user for ownership checks."""

    u = User(username="someone-else")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        description: str = "Test habit description",
        start_date: date = date(2024, 1, 1),
        end_date: date = date(2024, 12, 31),
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def completion_factory(db_session, user):
    """Factory for persisting completion rows directly."""

    def _complete(habit: Habit, *days: date) -> None:
        for day in days:
            db_session.add(HabitCompletion(user_id=habit.user_id, habit_id=habit.id, completed_on=day))
        db_session.commit()

    return _complete


@pytest.fixture
def journal_factory(db_session, user):
    """Factory for creating journal entries.

    Returns:
        Callable: Function that creates and persists JournalEntry instances
    """

    def _create_entry(
        journal_date: date,
        sentiment_score: int = 3,
        entry_text: str = "A day",
        ai_tip: str | None = None,
        owner: User | None = None,
    ) -> JournalEntry:
        owner = owner or user
        entry = JournalEntry(
            user_id=owner.id,
            journal_date=journal_date,
            sentiment_score=sentiment_score,
            entry_text=entry_text,
            ai_tip=ai_tip,
        )
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _create_entry
