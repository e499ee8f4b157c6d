"""
Domain Entities - Upload

An ``UploadRecord`` is created when a historical consumption file is
accepted and is then moved through the retrain lifecycle:

    uploaded -> training -> trained | failed

A fresh retrain may start again from ``trained`` or ``failed``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from aquacast.domain.entities.consumption import DateRange, Granularity


class UploadStatus(str, Enum):
    """Processing status of an accepted upload."""

    UPLOADED = "uploaded"
    TRAINING = "training"
    TRAINED = "trained"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why a retrain ended in ``failed``."""

    TIMEOUT = "timeout"
    REMOTE_ERROR = "remote_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    MISSING_ARTIFACT = "missing_artifact"
    INTERNAL_ERROR = "internal_error"


@dataclass
class TrainingMetrics:
    """Accuracy metrics reported by the training service."""

    mae: float
    rmse: float
    mape: float
    train_size: int
    test_size: int


@dataclass
class ForecastSummary:
    """Number of points in each horizon of the produced forecast."""

    daily_count: int = 0
    weekly_count: int = 0
    monthly_count: int = 0


@dataclass
class TrainingResult:
    """Outcome of a retrain attached to its upload."""

    success: bool
    training_time_seconds: int = 0
    metrics: Optional[TrainingMetrics] = None
    forecast_summary: ForecastSummary = field(default_factory=ForecastSummary)
    error: Optional[str] = None
    failure_reason: Optional[FailureReason] = None


@dataclass
class UploadRecord:
    """One accepted historical consumption file."""

    stored_file_name: str
    data_type: Granularity
    row_count: int
    date_range: DateRange
    file_hash: str
    id: UUID = field(default_factory=uuid4)
    original_file_name: Optional[str] = None
    status: UploadStatus = UploadStatus.UPLOADED
    training_result: Optional[TrainingResult] = None
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def update_timestamp(self) -> None:
        """Update the 'updated_at' timestamp to current time."""
        self.updated_at = datetime.now(timezone.utc)

    def mark_training(self) -> None:
        """Enter the in-progress state of a new retrain."""
        self.status = UploadStatus.TRAINING
        self.update_timestamp()

    def mark_trained(self, result: TrainingResult) -> None:
        """Record a successful retrain."""
        self.status = UploadStatus.TRAINED
        self.training_result = result
        self.update_timestamp()

    def mark_failed(
        self,
        reason: FailureReason,
        error: str,
        training_time_seconds: int = 0,
    ) -> None:
        """Record a failed retrain together with why it failed."""
        self.status = UploadStatus.FAILED
        self.training_result = TrainingResult(
            success=False,
            training_time_seconds=training_time_seconds,
            error=error,
            failure_reason=reason,
        )
        self.update_timestamp()

    @property
    def is_training(self) -> bool:
        return self.status == UploadStatus.TRAINING
