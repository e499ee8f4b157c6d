"""
Database package - Infrastructure Layer

This package contains the MongoDB connection wrapper and the names of the
collections and GridFS buckets used by the repositories.
"""

from aquacast.infrastructure.database.mongo_database import (
    FORECASTS_COLLECTION,
    UPLOAD_FILES_BUCKET,
    UPLOADS_COLLECTION,
    MongoDatabase,
)

__all__ = [
    "FORECASTS_COLLECTION",
    "MongoDatabase",
    "UPLOAD_FILES_BUCKET",
    "UPLOADS_COLLECTION",
]
