"""Domain repository interface for raw uploaded file bytes."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IUploadFileRepository(ABC):
    """Stores the original bytes of each upload under its stored file name."""

    @abstractmethod
    async def save(
        self,
        stored_file_name: str,
        content: bytes,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Store file bytes and return the storage identifier."""
        pass

    @abstractmethod
    async def load(self, stored_file_name: str) -> Optional[bytes]:
        """Return the stored bytes, or ``None`` when the file is missing."""
        pass

    @abstractmethod
    async def delete(self, stored_file_name: str) -> bool:
        """Delete one stored file; ``False`` when it did not exist."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every stored file and return how many were removed."""
        pass
