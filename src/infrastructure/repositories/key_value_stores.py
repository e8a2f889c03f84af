"""
Key-Value Stores - Infrastructure Layer

Implementations of the durable string store: a process-local dictionary
and a MongoDB collection of ``{key, value}`` documents.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

import pymongo.errors
import structlog

from src.domain.entities.errors import StorageUnavailableError
from src.domain.repositories.key_value_store import IKeyValueStore
from src.infrastructure.database import MongoDatabase

logger = structlog.get_logger(__name__)


class InMemoryKeyValueStore(IKeyValueStore):
    """Key-value store living in process memory; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class MongoKeyValueStore(IKeyValueStore):
    """MongoDB implementation of the key-value store."""

    def __init__(self, mongo_database: MongoDatabase):
        """
        Initialize the MongoDB key-value store.

        Args:
            mongo_database: MongoDB database client
        """
        self.db = mongo_database
        self.collection_name = mongo_database.kv_collection

    async def get_item(self, key: str) -> Optional[str]:
        try:
            document = await self.db.find_one(self.collection_name, {"key": key})
        except pymongo.errors.PyMongoError as e:
            raise self._unavailable("read", key, e) from e
        if document is None:
            return None
        return document.get("value")

    async def set_item(self, key: str, value: str) -> None:
        document = {
            "key": key,
            "value": value,
            "updated_at": datetime.now(timezone.utc),
        }
        try:
            await self.db.upsert_one(self.collection_name, {"key": key}, document)
        except pymongo.errors.PyMongoError as e:
            raise self._unavailable("write", key, e) from e

    async def remove_item(self, key: str) -> None:
        try:
            await self.db.delete_one(self.collection_name, {"key": key})
        except pymongo.errors.PyMongoError as e:
            raise self._unavailable("delete", key, e) from e

    def _unavailable(
        self, operation: str, key: str, error: Exception
    ) -> StorageUnavailableError:
        logger.error("kv_store.mongo.failed", operation=operation, key=key, error=str(error))
        return StorageUnavailableError(
            f"Key-value store {operation} failed for '{key}': {str(error)}",
            details={"operation": operation, "key": key},
        )
