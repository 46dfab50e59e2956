"""
Storage abstraction layer.

All user persistence goes through `UserStore`. This allows swapping
implementations (in-memory for development and tests, MongoDB in
production) without changing application code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import TypeAdapter, ValidationError

from userapi.core.models import User


class UserStoreError(Exception):
    """A storage operation failed. The message is safe to surface."""
    pass


def validate_changes(changes: dict[str, Any]) -> None:
    """Check a partial update against the `User` field types."""
    for field, value in changes.items():
        info = User.model_fields.get(field)
        if info is None:
            raise UserStoreError(f"unknown user field: {field}")
        try:
            TypeAdapter(info.annotation).validate_python(value)
        except ValidationError as e:
            raise UserStoreError(f"invalid value for {field}: {e}") from e


# =============================================================================
# Storage Interface
# =============================================================================


class UserStore(ABC):
    """
    Document storage for users.

    Production Implementation: MongoDB
    Local Implementation: In-memory dict
    """

    async def open(self) -> None:
        """Acquire connections. Called once at app startup."""

    async def close(self) -> None:
        """Release connections. Called once at app shutdown."""

    @abstractmethod
    async def find_all(self) -> list[User]:
        """Return every stored user."""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> User | None:
        """Get a user by ID, or None if absent."""
        pass

    @abstractmethod
    async def insert(self, user: User) -> User:
        """Store a new user and return it."""
        pass

    @abstractmethod
    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """Apply a partial update. Returns the updated user, or None if absent."""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        """Delete a user. Returns False if absent."""
        pass


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection names."""

    USERS = "users"
