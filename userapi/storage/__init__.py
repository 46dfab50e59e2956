"""
Storage abstractions.

- UserStore → MongoDB in production, in-memory for development and tests
"""

from __future__ import annotations

import logging

from userapi.config import Settings
from userapi.storage.base import Collections, UserStore, UserStoreError
from userapi.storage.local import InMemoryUserStore
from userapi.storage.mongo import MongoUserStore

logger = logging.getLogger(__name__)


def create_user_store(settings: Settings) -> UserStore:
    """Pick the store implementation from settings."""
    if settings.use_mongo:
        return MongoUserStore(
            uri=settings.mongo_uri,
            database=settings.mongo_database,
            connect_timeout_seconds=settings.mongo_connect_timeout_seconds,
        )

    logger.warning("MONGO_URI not set - using in-memory user store (data is not persisted)")
    return InMemoryUserStore()


__all__ = [
    "Collections",
    "UserStore",
    "UserStoreError",
    "InMemoryUserStore",
    "MongoUserStore",
    "create_user_store",
]
