"""
In-Memory Retrain Tracker - Infrastructure Layer

Process-local single-flight guard for retrains. Progress of the latest
retrain of each upload stays readable after it finishes.
"""

import asyncio
from typing import Dict, Optional, Set
from uuid import UUID

import structlog

from aquacast.domain.entities.errors import RetrainInProgressError
from aquacast.domain.entities.retrain_progress import RetrainProgress

logger = structlog.get_logger(__name__)


class InMemoryRetrainTracker:
    """Tracks running retrains and their progress in memory."""

    def __init__(self, max_history: int = 256) -> None:
        """
        Initialize the tracker.

        Args:
            max_history: Number of finished progress entries kept readable
        """
        self.max_history = max_history
        self._running: Set[UUID] = set()
        self._progress: Dict[UUID, RetrainProgress] = {}
        self._lock = asyncio.Lock()

    async def claim(self, upload_id: UUID) -> RetrainProgress:
        async with self._lock:
            if upload_id in self._running:
                logger.warning(
                    "Retrain already in progress", upload_id=str(upload_id)
                )
                raise RetrainInProgressError(str(upload_id))

            self._running.add(upload_id)
            progress = RetrainProgress(upload_id=upload_id)
            # Re-insert so the dict stays ordered oldest first
            self._progress.pop(upload_id, None)
            self._progress[upload_id] = progress
            self._evict()
            return progress

    async def release(self, upload_id: UUID) -> None:
        async with self._lock:
            self._running.discard(upload_id)

    async def get(self, upload_id: UUID) -> Optional[RetrainProgress]:
        async with self._lock:
            return self._progress.get(upload_id)

    async def is_running(self, upload_id: UUID) -> bool:
        async with self._lock:
            return upload_id in self._running

    def _evict(self) -> None:
        finished = [
            upload_id
            for upload_id in self._progress
            if upload_id not in self._running
        ]
        excess = len(self._progress) - self.max_history
        for upload_id in finished[: max(0, excess)]:
            del self._progress[upload_id]
