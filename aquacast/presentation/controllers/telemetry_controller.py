"""
Presentation Layer - Telemetry Controller

This module contains the FastAPI controller exporting live telemetry.
"""

from typing import Optional

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from aquacast.application.use_cases.telemetry_export_use_case import (
    TelemetryExportUseCase,
)
from aquacast.domain.entities.consumption import Granularity
from aquacast.domain.entities.errors import TelemetryExportUnavailableError
from aquacast.main.container import AppContainer
from aquacast.shared.consts import XLSX_MEDIA_TYPE

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/telemetry", tags=["telemetry"])


@router.get(
    "/export",
    summary="Export telemetry as a workbook",
    description="""
    Export per-day or per-month consumption (m³) of a meter over a relative
    range such as `-30d`, as an `.xlsx` file in the upload layout.
    """,
    response_class=Response,
)
@inject
async def export_telemetry(
    range_: str = Query("-30d", alias="range", description="Relative range, e.g. -30d"),
    format_: Granularity = Query(
        Granularity.DAILY, alias="format", description="daily or monthly"
    ),
    device_id: Optional[str] = Query(None, description="Meter identifier"),
    export_use_case: TelemetryExportUseCase = Depends(
        Provide[AppContainer.telemetry_export_use_case]
    ),
) -> Response:
    try:
        content, file_name, rows = await export_use_case.execute(
            range_=range_, granularity=format_, device_id=device_id
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except TelemetryExportUnavailableError as e:
        logger.error("Telemetry export unavailable", error=e.message)
        raise HTTPException(
            status_code=503,
            detail="InfluxDB connection error. Please try again later.",
        )

    except Exception as e:
        logger.error("Unexpected error exporting telemetry", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to export data")

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{file_name}"',
            "X-Row-Count": str(rows),
        },
    )
