"""
Presentation Layer - Uploads Controller

This module contains the FastAPI controller for historical data uploads,
their retraining and the administrative registry operations.
"""

from typing import List, Optional
from uuid import UUID

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from fastapi.responses import JSONResponse

from aquacast.application.dtos.training_dto import (
    RetrainProgressDTO,
    RetrainRequestDTO,
    RetrainResponseDTO,
)
from aquacast.application.dtos.upload_dto import (
    ClearUploadsResponseDTO,
    DuplicateUploadDTO,
    UploadRecordDTO,
    UploadResponseDTO,
)
from aquacast.application.use_cases.retrain_use_case import RetrainUseCase
from aquacast.application.use_cases.upload_management_use_case import (
    UploadManagementUseCase,
)
from aquacast.domain.entities.consumption import Granularity
from aquacast.domain.entities.errors import (
    DatasetIntegrityError,
    DatasetValidationError,
    DomainError,
    MissingArtifactError,
    RemoteTimeoutError,
    RemoteTrainingFailedError,
    RetrainInProgressError,
    TrainingServiceUnavailableError,
    UnsupportedUploadError,
    UploadNotFoundError,
)
from aquacast.main.container import AppContainer
from aquacast.shared.consts import XLSX_MEDIA_TYPE

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


def _retrain_http_error(error: DomainError) -> HTTPException:
    """Map a retrain error to its HTTP response."""
    if isinstance(error, UploadNotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, RetrainInProgressError):
        return HTTPException(status_code=409, detail=error.message)
    if isinstance(error, MissingArtifactError):
        return HTTPException(status_code=500, detail="Upload file not found")
    if isinstance(error, DatasetIntegrityError):
        return HTTPException(status_code=500, detail="Stored upload could not be processed")
    if isinstance(error, RemoteTimeoutError):
        return HTTPException(status_code=504, detail=error.message)
    if isinstance(error, TrainingServiceUnavailableError):
        return HTTPException(status_code=503, detail=error.message)
    if isinstance(error, RemoteTrainingFailedError):
        return HTTPException(status_code=502, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)


@router.post(
    "",
    response_model=UploadResponseDTO,
    status_code=201,
    summary="Upload historical consumption data",
    description="""
    Upload an `.xlsx` or `.csv` file with a date column and a `total_m3`
    volume column.

    The file is fingerprinted first; a file that was already uploaded is
    answered with `409` and the existing upload. Accepted files are
    registered and, unless `auto_retrain=false`, the forecast model is
    retrained right away. A failed automatic retrain does not fail the upload.
    """,
    responses={409: {"model": DuplicateUploadDTO}},
)
@inject
async def upload_file(
    file: UploadFile = File(..., description="Historical data file"),
    auto_retrain: Optional[bool] = Query(
        None, description="Retrain after upload (defaults to configuration)"
    ),
    upload_use_case: UploadManagementUseCase = Depends(
        Provide[AppContainer.upload_management_use_case]
    ),
):
    """Upload a historical data file."""
    try:
        upload_use_case.check_size(file.size)
        # Reads at most one byte past the limit
        content = await file.read(upload_use_case.max_upload_bytes + 1)
        result = await upload_use_case.upload(
            content, file.filename, auto_retrain=auto_retrain
        )

        if isinstance(result, DuplicateUploadDTO):
            return JSONResponse(status_code=409, content=result.model_dump(mode="json"))

        return result

    except UnsupportedUploadError as e:
        status_code = 413 if e.too_large else 400
        raise HTTPException(status_code=status_code, detail=e.message)

    except DatasetValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Invalid data structure",
                "errors": e.errors,
                "warnings": e.warnings,
            },
        )

    except Exception as e:
        logger.error(
            "Unexpected error uploading file",
            file_name=file.filename,
            error=str(e),
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "",
    response_model=List[UploadRecordDTO],
    summary="List uploads",
    description="List every registered upload, newest first.",
)
@inject
async def list_uploads(
    upload_use_case: UploadManagementUseCase = Depends(
        Provide[AppContainer.upload_management_use_case]
    ),
) -> List[UploadRecordDTO]:
    try:
        return await upload_use_case.list_uploads()
    except Exception as e:
        logger.error("Unexpected error listing uploads", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete(
    "",
    response_model=ClearUploadsResponseDTO,
    summary="Clear all uploads",
    description="""
    Administrative clear: deletes every upload record, every stored file and
    the current forecast.
    """,
)
@inject
async def clear_uploads(
    upload_use_case: UploadManagementUseCase = Depends(
        Provide[AppContainer.upload_management_use_case]
    ),
) -> ClearUploadsResponseDTO:
    try:
        return await upload_use_case.clear_all()
    except Exception as e:
        logger.error("Unexpected error clearing uploads", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/templates/{granularity}",
    summary="Download upload template",
    description="Download the `.xlsx` template for daily or monthly data.",
    response_class=Response,
)
@inject
async def download_template(
    granularity: Granularity,
    upload_use_case: UploadManagementUseCase = Depends(
        Provide[AppContainer.upload_management_use_case]
    ),
) -> Response:
    content, file_name = upload_use_case.get_template(granularity)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get(
    "/{upload_id}",
    response_model=UploadRecordDTO,
    summary="Get upload",
)
@inject
async def get_upload(
    upload_id: UUID,
    upload_use_case: UploadManagementUseCase = Depends(
        Provide[AppContainer.upload_management_use_case]
    ),
) -> UploadRecordDTO:
    try:
        return await upload_use_case.get_upload(upload_id)

    except UploadNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    except Exception as e:
        logger.error(
            "Unexpected error getting upload", upload_id=str(upload_id), error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/{upload_id}/retrain",
    response_model=RetrainResponseDTO,
    summary="Retrain from an upload",
    description="""
    Retrain the forecast model from a registered upload.

    The stored file is re-validated, optionally merged with the last days of
    live telemetry and submitted to the training service. The new forecast
    replaces the current one.

    Errors: `404` unknown upload, `409` retrain already running, `502`
    training service error, `503` training service unreachable, `504`
    training timeout.
    """,
)
@inject
async def retrain_upload(
    upload_id: UUID,
    request: Optional[RetrainRequestDTO] = None,
    retrain_use_case: RetrainUseCase = Depends(Provide[AppContainer.retrain_use_case]),
) -> RetrainResponseDTO:
    request = request or RetrainRequestDTO()
    try:
        logger.info(
            "Starting retrain",
            upload_id=str(upload_id),
            use_telemetry=request.use_telemetry,
        )
        return await retrain_use_case.execute(
            upload_id, use_telemetry=request.use_telemetry
        )

    except DomainError as e:
        logger.error("Retrain failed", upload_id=str(upload_id), error=e.message)
        raise _retrain_http_error(e)

    except Exception as e:
        logger.error(
            "Unexpected error during retrain", upload_id=str(upload_id), error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/{upload_id}/progress",
    response_model=RetrainProgressDTO,
    summary="Get retrain progress",
    description="Phase, percentage and step log of the latest retrain of an upload.",
)
@inject
async def get_retrain_progress(
    upload_id: UUID,
    retrain_use_case: RetrainUseCase = Depends(Provide[AppContainer.retrain_use_case]),
) -> RetrainProgressDTO:
    try:
        return await retrain_use_case.get_progress(upload_id)

    except UploadNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    except Exception as e:
        logger.error(
            "Unexpected error getting retrain progress",
            upload_id=str(upload_id),
            error=str(e),
        )
        raise HTTPException(status_code=500, detail="Internal server error")
