"""
MongoDB Database - Infrastructure Layer

This module provides a MongoDB database client for interacting with MongoDB.
It handles connection, collections, and the document operations used by
the durable key-value store.
"""

from typing import Any, Dict, Optional

import pymongo.errors
import structlog
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = structlog.get_logger(__name__)


class MongoDatabase:
    """MongoDB database client."""

    def __init__(self, mongo_uri: str, db_name: str, kv_collection: str = "kv_store"):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
            kv_collection: Collection holding key-value documents
        """
        self.client: MongoClient = MongoClient(mongo_uri)
        self.db: Database = self.client[db_name]
        self.kv_collection = kv_collection

    def get_collection(self, collection_name: str) -> Collection:
        return self.db[collection_name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Find a single document in a collection.

        Args:
            collection_name: Name of the collection
            query: Query to match documents

        Returns:
            The document if found, None otherwise
        """
        return self.db[collection_name].find_one(query)

    async def upsert_one(
        self, collection_name: str, query: Dict[str, Any], document: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Replace the document matching ``query``, inserting it when absent.

        Raises:
            OperationFailure: If the write is not acknowledged
        """
        result = self.db[collection_name].replace_one(query, document, upsert=True)
        if not result.acknowledged:
            raise pymongo.errors.OperationFailure(
                f"Failed to upsert document in {collection_name}"
            )
        return document

    async def delete_one(self, collection_name: str, query: Dict[str, Any]) -> int:
        """
        Delete a document from a collection.

        Returns:
            Number of deleted documents (0 or 1)
        """
        result = self.db[collection_name].delete_one(query)
        return result.deleted_count

    async def ping(self) -> None:
        self.client.admin.command("ping")

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    async def create_indexes(self) -> None:
        """
        Create all necessary indexes for the application.
        This is an async method to be called during application startup.
        """
        try:
            self.db[self.kv_collection].create_index(
                "key", name="kv_key_idx", unique=True, background=True
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning("mongo.indexes.failed", error=str(e))
