"""
Repositories Package

This package contains interfaces defining repository contracts
for data access operations. Specific implementations are provided
by the infrastructure layer.
"""

from .forecast_repository import IForecastRepository
from .upload_file_repository import IUploadFileRepository
from .upload_repository import IUploadRepository, UploadMutator

__all__ = [
    "IForecastRepository",
    "IUploadFileRepository",
    "IUploadRepository",
    "UploadMutator",
]
