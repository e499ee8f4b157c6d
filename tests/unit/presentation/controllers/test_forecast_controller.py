from __future__ import annotations

import pytest
from fastapi import HTTPException

from aquacast.application.dtos.forecast_dto import (
    ClearForecastResponseDTO,
    ForecastArtifactDTO,
    ForecastMetadataDTO,
)
from aquacast.application.use_cases.forecast_use_cases import ForecastNotFoundError
from aquacast.domain.entities.errors import ForecastStoreError
from aquacast.presentation.controllers.forecast_controller import (
    clear_forecast,
    get_forecast,
)


class _StubUseCase:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def execute(self):
        if self.error is not None:
            raise self.error
        return self.result


@pytest.mark.asyncio
async def test_get_forecast() -> None:
    dto = ForecastArtifactDTO(
        daily=[],
        weekly=[],
        monthly=[],
        metadata=ForecastMetadataDTO(
            model="prophet", trained_on="2025-01-02", prediction_date="2025-01-03"
        ),
    )

    assert await get_forecast(get_forecast_use_case=_StubUseCase(dto)) is dto


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, status_code",
    [(ForecastNotFoundError(), 404), (ForecastStoreError("read failed"), 500)],
)
async def test_get_forecast_errors(error, status_code) -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_forecast(get_forecast_use_case=_StubUseCase(error=error))

    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_clear_forecast() -> None:
    dto = ClearForecastResponseDTO(cleared=True, message="Forecast data cleared successfully")

    assert await clear_forecast(clear_forecast_use_case=_StubUseCase(dto)) is dto

    with pytest.raises(HTTPException) as exc_info:
        await clear_forecast(
            clear_forecast_use_case=_StubUseCase(error=ForecastStoreError("down"))
        )
    assert exc_info.value.status_code == 500
