"""
Presentation Layer - Forecast Controller

This module contains the FastAPI controller for the current forecast.
"""

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException

from aquacast.application.dtos.forecast_dto import (
    ClearForecastResponseDTO,
    ForecastArtifactDTO,
)
from aquacast.application.use_cases.forecast_use_cases import (
    ClearForecastUseCase,
    ForecastNotFoundError,
    GetForecastUseCase,
)
from aquacast.domain.entities.errors import ForecastStoreError
from aquacast.main.container import AppContainer

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/forecast", tags=["forecast"])


@router.get(
    "",
    response_model=ForecastArtifactDTO,
    summary="Get current forecast",
    description="Daily, weekly and monthly forecast from the latest successful retrain.",
)
@inject
async def get_forecast(
    get_forecast_use_case: GetForecastUseCase = Depends(
        Provide[AppContainer.get_forecast_use_case]
    ),
) -> ForecastArtifactDTO:
    try:
        return await get_forecast_use_case.execute()

    except ForecastNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    except ForecastStoreError as e:
        logger.error("Forecast store error", error=e.message)
        raise HTTPException(status_code=500, detail="Failed to load forecast")


@router.delete(
    "",
    response_model=ClearForecastResponseDTO,
    summary="Clear current forecast",
)
@inject
async def clear_forecast(
    clear_forecast_use_case: ClearForecastUseCase = Depends(
        Provide[AppContainer.clear_forecast_use_case]
    ),
) -> ClearForecastResponseDTO:
    try:
        return await clear_forecast_use_case.execute()

    except ForecastStoreError as e:
        logger.error("Forecast store error", error=e.message)
        raise HTTPException(status_code=500, detail="Failed to clear forecast data")
