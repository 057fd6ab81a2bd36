"""User repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    """Repository for user rows."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a user by ID."""
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        """Retrieve a user by username."""
        ...

    def get_or_create(self, username: str, *, display_name: str = "") -> User:
        """Return the named user, creating it on first use."""
        ...
