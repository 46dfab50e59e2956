"""
MongoDB user storage.

Documents use the user ID as `_id`. Driver failures are re-raised as
`UserStoreError` so the API can surface them without knowing the driver.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from userapi.core.models import User
from userapi.core.utils import utc_now
from userapi.storage.base import Collections, UserStore, UserStoreError, validate_changes

logger = logging.getLogger(__name__)


def _to_document(user: User) -> dict[str, Any]:
    doc = user.model_dump(exclude={"id"})
    doc["_id"] = user.id
    return doc


def _from_document(doc: dict[str, Any]) -> User:
    data = dict(doc)
    data["id"] = str(data.pop("_id"))
    try:
        return User.model_validate(data)
    except ValidationError as e:
        raise UserStoreError(f"stored user {data['id']} is invalid: {e}") from e


class MongoUserStore(UserStore):
    """User storage backed by a MongoDB collection."""

    def __init__(
        self,
        uri: str,
        database: str,
        connect_timeout_seconds: float = 30.0,
        collection: str = Collections.USERS,
    ):
        if not uri:
            raise ValueError("MongoDB URI is required")
        if not database:
            raise ValueError("MongoDB database name is required")

        timeout_ms = int(connect_timeout_seconds * 1000)
        self.database_name = database
        self._client: AsyncMongoClient = AsyncMongoClient(
            uri,
            connectTimeoutMS=timeout_ms,
            serverSelectionTimeoutMS=timeout_ms,
            tz_aware=True,
        )
        self._collection = self._client[database][collection]

    async def open(self) -> None:
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise UserStoreError(f"cannot connect to MongoDB: {e}") from e
        logger.info(f"Connected to MongoDB database {self.database_name}")

    async def close(self) -> None:
        await self._client.close()

    async def find_all(self) -> list[User]:
        try:
            docs = await self._collection.find({}).to_list(length=None)
        except PyMongoError as e:
            raise UserStoreError(str(e)) from e
        return [_from_document(d) for d in docs]

    async def find_by_id(self, user_id: str) -> User | None:
        try:
            doc = await self._collection.find_one({"_id": user_id})
        except PyMongoError as e:
            raise UserStoreError(str(e)) from e
        return _from_document(doc) if doc else None

    async def insert(self, user: User) -> User:
        try:
            await self._collection.insert_one(_to_document(user))
        except PyMongoError as e:
            raise UserStoreError(str(e)) from e
        return user

    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        validate_changes(changes)
        try:
            doc = await self._collection.find_one_and_update(
                {"_id": user_id},
                {"$set": {**changes, "updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise UserStoreError(str(e)) from e
        return _from_document(doc) if doc else None

    async def delete(self, user_id: str) -> bool:
        try:
            result = await self._collection.delete_one({"_id": user_id})
        except PyMongoError as e:
            raise UserStoreError(str(e)) from e
        return result.deleted_count > 0
