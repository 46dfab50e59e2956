"""
User service - business operations over the user store.

Every store call is bounded by the configured operation timeout. A timeout
is reported as a `UserStoreError` like any other storage failure. If the
calling task is cancelled, the in-flight store call is cancelled with it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from userapi.core.models import User, UserCreate, UserUpdate
from userapi.storage.base import UserStore, UserStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UserService:
    """CRUD operations on users."""

    def __init__(self, store: UserStore, timeout_seconds: float = 10.0):
        self.store = store
        self.timeout_seconds = timeout_seconds

    async def _bounded(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(f"User store {operation} timed out after {self.timeout_seconds}s")
            raise UserStoreError(f"{operation} timed out") from e
        except UserStoreError as e:
            logger.error(f"User store {operation} failed: {e}")
            raise

    async def get_users(self) -> list[User]:
        return await self._bounded("find users", self.store.find_all())

    async def get_user(self, user_id: str) -> User | None:
        return await self._bounded("find user", self.store.find_by_id(user_id))

    async def create_user(self, data: UserCreate) -> User:
        return await self._bounded("insert user", self.store.insert(data.to_user()))

    async def update_user(self, user_id: str, data: UserUpdate) -> User | None:
        """Apply the set fields of `data`. Returns None if the user is gone."""
        changes = data.changes()
        if not changes:
            return await self.get_user(user_id)
        return await self._bounded("update user", self.store.update(user_id, changes))

    async def delete_user(self, user_id: str) -> bool:
        return await self._bounded("delete user", self.store.delete(user_id))
