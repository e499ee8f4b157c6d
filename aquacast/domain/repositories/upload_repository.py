"""
Domain Repository Interface - Upload Registry

Durable record of every accepted upload, indexed by identifier and by
content fingerprint.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional
from uuid import UUID

from aquacast.domain.entities.upload import UploadRecord

UploadMutator = Callable[[UploadRecord], None]


class IUploadRepository(ABC):
    """Interface for the upload registry."""

    @abstractmethod
    async def create(self, record: UploadRecord) -> UploadRecord:
        """Append a new upload record."""
        pass

    @abstractmethod
    async def get_by_id(self, upload_id: UUID) -> Optional[UploadRecord]:
        """Get an upload record by ID."""
        pass

    @abstractmethod
    async def get_by_hash(self, file_hash: str) -> Optional[UploadRecord]:
        """Get the upload record whose content has the given fingerprint."""
        pass

    @abstractmethod
    async def update(self, upload_id: UUID, mutator: UploadMutator) -> UploadRecord:
        """
        Load a record, apply ``mutator`` to it and persist the result.

        Raises:
            UploadNotFoundError: If no record has this ID.
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[UploadRecord]:
        """List every upload record, newest first."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every upload record and return how many were removed."""
        pass
