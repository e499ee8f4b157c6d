"""
Infrastructure Gateway - Training Service

HTTP client of the external forecast training service. A dataset workbook is
posted as multipart field ``file`` to ``/api/train``; the service answers
with the forecast and its evaluation metrics as JSON.
"""

from typing import Any, Dict

import httpx
import structlog

from aquacast.domain.entities.errors import (
    InvalidTrainingResponseError,
    RemoteTimeoutError,
    RemoteTrainingFailedError,
    TrainingServiceUnavailableError,
)
from aquacast.domain.gateways.training_service_gateway import ITrainingServiceGateway
from aquacast.shared.consts import XLSX_MEDIA_TYPE

logger = structlog.get_logger(__name__)


class TrainingServiceGateway(ITrainingServiceGateway):
    """Implementation of the training service gateway using HTTP client."""

    def __init__(self, base_url: str, timeout: float = 300.0):
        """
        Initialize the training service gateway.

        Args:
            base_url: Base URL of the training service (e.g., "http://trainer:5000")
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def train(self, workbook: bytes, file_name: str) -> Dict[str, Any]:
        url = f"{self.base_url}/api/train"
        files = {"file": (file_name, workbook, XLSX_MEDIA_TYPE)}

        logger.info(
            "Submitting dataset to training service",
            url=url,
            file_name=file_name,
            size_bytes=len(workbook),
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, files=files)
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(
                "Training service HTTP error",
                status_code=e.response.status_code,
                response_text=e.response.text,
                url=url,
            )
            raise RemoteTrainingFailedError(
                e.response.text, status_code=e.response.status_code
            ) from e

        except httpx.TimeoutException as e:
            logger.error("Training service timeout", error=str(e), url=url)
            raise RemoteTimeoutError(self.timeout) from e

        except httpx.RequestError as e:
            logger.error("Training service request error", error=str(e), url=url)
            raise TrainingServiceUnavailableError(
                "Training server unavailable. Please ensure the training "
                f"service is running at {self.base_url}",
                {"error": str(e)},
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(
                "Training service returned non-JSON body",
                response_text=response.text[:500],
            )
            raise InvalidTrainingResponseError(
                "training service returned a non-JSON response"
            ) from e

        if not isinstance(payload, dict):
            raise InvalidTrainingResponseError(
                "training service returned an unexpected JSON document"
            )

        logger.info("Received response from training service", url=url)
        return payload
