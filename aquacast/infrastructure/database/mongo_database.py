"""
MongoDB Database - Infrastructure Layer

This module provides a MongoDB database client shared by the repositories.
It handles the connection, collection access and index creation.
"""

import pymongo.errors
import structlog
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = structlog.get_logger(__name__)

UPLOADS_COLLECTION = "uploads"
FORECASTS_COLLECTION = "forecasts"
UPLOAD_FILES_BUCKET = "upload_files"


class MongoDatabase:
    """MongoDB database client."""

    def __init__(self, mongo_uri: str, db_name: str):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
        """
        self.client: MongoClient = MongoClient(mongo_uri)
        self.db: Database = self.client[db_name]

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a collection from the database.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB collection
        """
        return self.db[collection_name]

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    def _safe_drop_index(self, collection_name: str, index_name: str) -> None:
        """
        Safely drop an index if it exists.

        Args:
            collection_name: Name of the collection
            index_name: Name of the index to drop
        """
        try:
            self.db[collection_name].drop_index(index_name)
        except pymongo.errors.OperationFailure:
            # Index doesn't exist, nothing to do
            pass

    async def create_indexes(self) -> None:
        """
        Create all necessary indexes for the application.
        This is an async method to be called during application startup.
        """
        collection = self.db[UPLOADS_COLLECTION]

        # Older deployments indexed file_hash without the unique constraint
        self._safe_drop_index(UPLOADS_COLLECTION, "file_hash_idx")

        try:
            collection.create_index("id", name="upload_id_idx", unique=True)
            collection.create_index(
                "file_hash", name="file_hash_unique_idx", unique=True
            )
            collection.create_index(
                [("uploaded_at", DESCENDING)], name="uploaded_at_idx"
            )
            collection.create_index(
                [("status", ASCENDING), ("updated_at", DESCENDING)],
                name="status_updated_idx",
                background=True,
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning("Failed to create upload indexes", error=str(e))
