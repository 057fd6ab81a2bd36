"""SQLModel implementation of User repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.user import User
from ..database import SessionFactory


class SQLModelUserRepository:
    """SQLModel-based user repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.get(User, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_username(self, username: str) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.exec(select(User).where(User.username == username.strip())).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_or_create(self, username: str, *, display_name: str = "") -> User:
        """Return the named user, creating it on first use."""
        username = username.strip()
        if not username:
            raise ValueError("Username is required")
        existing = self.get_by_username(username)
        if existing is not None:
            return existing
        with self.session_factory() as session:
            user = User(username=username, display_name=display_name or username)
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
