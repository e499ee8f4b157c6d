"""Application use cases for reading and clearing the current forecast."""

import structlog

from aquacast.application.dtos.forecast_dto import (
    ClearForecastResponseDTO,
    ForecastArtifactDTO,
)
from aquacast.domain.entities.errors import ForecastStoreError
from aquacast.domain.repositories.forecast_repository import IForecastRepository

logger = structlog.get_logger(__name__)


class ForecastNotFoundError(ForecastStoreError):
    """Raised when no forecast has been produced yet."""

    def __init__(self) -> None:
        super().__init__("No forecast available. Train a model first.")


class GetForecastUseCase:
    def __init__(self, forecast_repository: IForecastRepository):
        self.forecast_repository = forecast_repository

    async def execute(self) -> ForecastArtifactDTO:
        """
        Return the current forecast.

        Raises:
            ForecastNotFoundError: If no forecast exists
        """
        artifact = await self.forecast_repository.read()
        if artifact is None:
            raise ForecastNotFoundError()
        return ForecastArtifactDTO.from_entity(artifact)


class ClearForecastUseCase:
    def __init__(self, forecast_repository: IForecastRepository):
        self.forecast_repository = forecast_repository

    async def execute(self) -> ClearForecastResponseDTO:
        cleared = await self.forecast_repository.clear()
        logger.info("Forecast cleared", cleared=cleared)
        return ClearForecastResponseDTO(
            cleared=cleared,
            message=(
                "Forecast data cleared successfully"
                if cleared
                else "No forecast data to clear"
            ),
        )
