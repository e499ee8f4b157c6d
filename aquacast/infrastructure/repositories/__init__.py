"""
Repositories Package - Infrastructure Layer

This package contains concrete implementations of the repository
interfaces defined in the domain layer. These implementations
handle the details of data persistence.
"""

from .forecast_repository import ForecastRepository
from .gridfs_upload_file_repository import GridFSUploadFileRepository
from .upload_repository import UploadRepository

__all__ = ["ForecastRepository", "GridFSUploadFileRepository", "UploadRepository"]
