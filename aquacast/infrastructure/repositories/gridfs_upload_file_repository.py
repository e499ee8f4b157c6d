"""
GridFS Upload File Repository - Infrastructure Layer

Stores the original bytes of every accepted upload in the GridFS bucket
``upload_files``, addressed by the timestamp-based stored file name.
"""

import mimetypes
from typing import Any, Dict, Optional

import gridfs
import structlog
from pymongo import MongoClient
from pymongo.database import Database

from aquacast.domain.entities.errors import UploadStorageError
from aquacast.domain.repositories.upload_file_repository import IUploadFileRepository
from aquacast.infrastructure.database.mongo_database import UPLOAD_FILES_BUCKET
from aquacast.shared.consts import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE

logger = structlog.get_logger(__name__)


class GridFSUploadFileRepository(IUploadFileRepository):
    """MongoDB GridFS implementation of the upload file repository."""

    def __init__(self, mongo_client: MongoClient, database_name: str):
        """
        Initialize the GridFS upload file repository.

        Args:
            mongo_client: MongoDB client connection
            database_name: Name of the database to use
        """
        self.db: Database = mongo_client[database_name]
        self.fs = gridfs.GridFS(self.db, collection=UPLOAD_FILES_BUCKET)

    async def save(
        self,
        stored_file_name: str,
        content: bytes,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Save upload bytes to GridFS.

        Returns:
            GridFS file ID as string

        Raises:
            UploadStorageError: If save operation fails
        """
        try:
            file_id = self.fs.put(
                content,
                filename=stored_file_name,
                metadata={
                    "content_type": self._get_content_type(stored_file_name),
                    **(metadata or {}),
                },
            )
            logger.info(
                "Upload file saved to GridFS",
                stored_file_name=stored_file_name,
                file_id=str(file_id),
                size_bytes=len(content),
            )
            return str(file_id)

        except Exception as e:
            logger.error(
                "Failed to save upload file to GridFS",
                stored_file_name=stored_file_name,
                error=str(e),
            )
            raise UploadStorageError(f"Failed to save upload file: {e}") from e

    async def load(self, stored_file_name: str) -> Optional[bytes]:
        try:
            grid_out = self.fs.find_one({"filename": stored_file_name})
            if grid_out is None:
                logger.debug(
                    "Upload file not found", stored_file_name=stored_file_name
                )
                return None
            return grid_out.read()

        except Exception as e:
            logger.error(
                "Failed to read upload file from GridFS",
                stored_file_name=stored_file_name,
                error=str(e),
            )
            raise UploadStorageError(f"Failed to read upload file: {e}") from e

    async def delete(self, stored_file_name: str) -> bool:
        try:
            deleted = False
            for grid_out in self.fs.find({"filename": stored_file_name}):
                self.fs.delete(grid_out._id)
                deleted = True
            logger.info(
                "Upload file deleted",
                stored_file_name=stored_file_name,
                deleted=deleted,
            )
            return deleted

        except Exception as e:
            logger.error(
                "Failed to delete upload file",
                stored_file_name=stored_file_name,
                error=str(e),
            )
            raise UploadStorageError(f"Failed to delete upload file: {e}") from e

    async def delete_all(self) -> int:
        try:
            deleted = 0
            for grid_out in self.fs.find({}):
                self.fs.delete(grid_out._id)
                deleted += 1
            logger.info("Upload files deleted", count=deleted)
            return deleted

        except Exception as e:
            logger.error("Failed to delete upload files", error=str(e))
            raise UploadStorageError(f"Failed to delete upload files: {e}") from e

    @staticmethod
    def _get_content_type(stored_file_name: str) -> str:
        if stored_file_name.endswith(".xlsx"):
            return XLSX_MEDIA_TYPE
        if stored_file_name.endswith(".csv"):
            return CSV_MEDIA_TYPE
        return mimetypes.guess_type(stored_file_name)[0] or "application/octet-stream"
