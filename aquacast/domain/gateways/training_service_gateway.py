"""Domain gateway interface for the external forecast training service."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class ITrainingServiceGateway(ABC):
    """Submits a training dataset and returns the decoded JSON response."""

    @abstractmethod
    async def train(self, workbook: bytes, file_name: str) -> Dict[str, Any]:
        """
        Upload a ``date``/``total_m3`` workbook to the training service.

        Raises:
            TrainingServiceUnavailableError: If the service cannot be reached.
            RemoteTrainingFailedError: If the service answers with an error.
        """
        pass
