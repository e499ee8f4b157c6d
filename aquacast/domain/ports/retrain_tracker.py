"""Domain port for single-flight retrain tracking."""

from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from aquacast.domain.entities.retrain_progress import RetrainProgress


class IRetrainTracker(Protocol):
    """Ensures at most one retrain per upload and exposes its progress."""

    async def claim(self, upload_id: UUID) -> RetrainProgress:
        """Start tracking a retrain.

        Raises:
            RetrainInProgressError: If the upload already has a running retrain.
        """
        ...

    async def release(self, upload_id: UUID) -> None:
        """Mark the retrain as no longer running; its progress stays readable."""

    async def get(self, upload_id: UUID) -> Optional[RetrainProgress]:
        """Return the latest known progress of the upload's retrain."""

    async def is_running(self, upload_id: UUID) -> bool:
        """Whether a retrain currently holds the claim for this upload."""
