"""
Application DTOs - Uploads

API contracts of the upload registry endpoints.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from aquacast.domain.entities.consumption import Granularity
from aquacast.domain.entities.upload import (
    FailureReason,
    TrainingResult,
    UploadRecord,
    UploadStatus,
)
from aquacast.domain.services.accuracy import AccuracyRating, rate_mape


class DateRangeDTO(BaseModel):
    start: str
    end: str


class TrainingMetricsDTO(BaseModel):
    """DTO for training metrics."""

    mae: float
    rmse: float
    mape: float
    train_size: int
    test_size: int


class AccuracyDTO(BaseModel):
    """MAPE-based accuracy rating shown next to the metrics."""

    rating: AccuracyRating
    interpretation: str


class ForecastSummaryDTO(BaseModel):
    daily_count: int = 0
    weekly_count: int = 0
    monthly_count: int = 0


class TrainingResultDTO(BaseModel):
    """DTO for the outcome of a retrain."""

    success: bool
    training_time_seconds: int = 0
    metrics: Optional[TrainingMetricsDTO] = None
    accuracy: Optional[AccuracyDTO] = None
    forecast_summary: ForecastSummaryDTO = Field(default_factory=ForecastSummaryDTO)
    error: Optional[str] = None
    failure_reason: Optional[FailureReason] = None

    @classmethod
    def from_entity(cls, result: TrainingResult) -> "TrainingResultDTO":
        metrics = None
        accuracy = None
        if result.metrics is not None:
            metrics = TrainingMetricsDTO(
                mae=result.metrics.mae,
                rmse=result.metrics.rmse,
                mape=result.metrics.mape,
                train_size=result.metrics.train_size,
                test_size=result.metrics.test_size,
            )
            assessment = rate_mape(result.metrics.mape)
            accuracy = AccuracyDTO(
                rating=assessment.rating,
                interpretation=assessment.interpretation,
            )
        return cls(
            success=result.success,
            training_time_seconds=result.training_time_seconds,
            metrics=metrics,
            accuracy=accuracy,
            forecast_summary=ForecastSummaryDTO(
                daily_count=result.forecast_summary.daily_count,
                weekly_count=result.forecast_summary.weekly_count,
                monthly_count=result.forecast_summary.monthly_count,
            ),
            error=result.error,
            failure_reason=result.failure_reason,
        )


class UploadRecordDTO(BaseModel):
    """DTO for one upload registry entry."""

    id: UUID
    stored_file_name: str
    original_file_name: Optional[str] = None
    uploaded_at: datetime
    updated_at: datetime
    data_type: Granularity
    row_count: int
    date_range: DateRangeDTO
    file_hash: str
    status: UploadStatus
    training_result: Optional[TrainingResultDTO] = None

    @classmethod
    def from_entity(cls, record: UploadRecord) -> "UploadRecordDTO":
        return cls(
            id=record.id,
            stored_file_name=record.stored_file_name,
            original_file_name=record.original_file_name,
            uploaded_at=record.uploaded_at,
            updated_at=record.updated_at,
            data_type=record.data_type,
            row_count=record.row_count,
            date_range=DateRangeDTO(
                start=record.date_range.start, end=record.date_range.end
            ),
            file_hash=record.file_hash,
            status=record.status,
            training_result=(
                TrainingResultDTO.from_entity(record.training_result)
                if record.training_result
                else None
            ),
        )


class UploadResponseDTO(BaseModel):
    """DTO returned after a file has been accepted."""

    message: str = "File uploaded successfully"
    upload: UploadRecordDTO
    warnings: List[str] = Field(default_factory=list)
    training_triggered: bool = False
    training_result: Optional[TrainingResultDTO] = None
    training_error: Optional[str] = None


class DuplicateUploadDTO(BaseModel):
    """Conflict payload pointing at the already registered upload."""

    message: str = "This file has already been uploaded"
    existing_upload: UploadRecordDTO


class UploadValidationErrorDTO(BaseModel):
    message: str = "Invalid data structure"
    errors: List[str]
    warnings: List[str] = Field(default_factory=list)


class ClearUploadsResponseDTO(BaseModel):
    deleted_uploads: int
    deleted_files: int
    forecast_cleared: bool
