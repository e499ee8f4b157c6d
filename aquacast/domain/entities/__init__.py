"""
Domain Entities Package

This package contains the core domain entities and business logic.
"""

from .consumption import ConsumptionRecord, DateRange, Granularity
from .errors import (
    DatasetIntegrityError,
    DatasetValidationError,
    DomainError,
    ForecastStoreError,
    InvalidTrainingResponseError,
    MissingArtifactError,
    RemoteTimeoutError,
    RemoteTrainingFailedError,
    RetrainInProgressError,
    TelemetryExportUnavailableError,
    TrainingServiceUnavailableError,
    UnsupportedUploadError,
    UploadNotFoundError,
    UploadStorageError,
)
from .forecast import ForecastArtifact, ForecastMetadata, ForecastPoint
from .pricing import BillBreakdown, BillingPeriod, PricingSettings, PricingTier
from .retrain_progress import (
    LogLevel,
    ProgressLogEntry,
    RetrainPhase,
    RetrainProgress,
)
from .upload import (
    FailureReason,
    ForecastSummary,
    TrainingMetrics,
    TrainingResult,
    UploadRecord,
    UploadStatus,
)

__all__ = [
    "ConsumptionRecord",
    "DateRange",
    "Granularity",
    "UploadRecord",
    "UploadStatus",
    "FailureReason",
    "TrainingMetrics",
    "TrainingResult",
    "ForecastSummary",
    "ForecastArtifact",
    "ForecastMetadata",
    "ForecastPoint",
    "PricingTier",
    "PricingSettings",
    "BillBreakdown",
    "BillingPeriod",
    "RetrainPhase",
    "RetrainProgress",
    "ProgressLogEntry",
    "LogLevel",
    "DomainError",
    "DatasetValidationError",
    "DatasetIntegrityError",
    "UnsupportedUploadError",
    "UploadNotFoundError",
    "UploadStorageError",
    "MissingArtifactError",
    "RemoteTimeoutError",
    "RemoteTrainingFailedError",
    "InvalidTrainingResponseError",
    "TrainingServiceUnavailableError",
    "TelemetryExportUnavailableError",
    "RetrainInProgressError",
    "ForecastStoreError",
]
