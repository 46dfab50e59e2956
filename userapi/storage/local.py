"""
In-memory user storage for development and tests.

Works without any external services.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import ValidationError

from userapi.core.models import User
from userapi.core.utils import utc_now
from userapi.storage.base import UserStore, UserStoreError


class InMemoryUserStore(UserStore):
    """In-memory document storage for development."""

    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[str, User] = {u.id: u for u in users}

    async def find_all(self) -> list[User]:
        return [u.model_copy() for u in self._users.values()]

    async def find_by_id(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    async def insert(self, user: User) -> User:
        if user.id in self._users:
            raise UserStoreError(f"duplicate user id: {user.id}")
        self._users[user.id] = user.model_copy()
        return user

    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        current = self._users.get(user_id)
        if current is None:
            return None

        try:
            updated = User.model_validate({**current.model_dump(), **changes, "updated_at": utc_now()})
        except ValidationError as e:
            raise UserStoreError(f"invalid update for user {user_id}: {e}") from e

        self._users[user_id] = updated
        return updated.model_copy()

    async def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None
