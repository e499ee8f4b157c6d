"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .billing_dto import (
    BillBreakdownDTO,
    BillCalculationRequestDTO,
    BillingPeriodDTO,
    PricingTierDTO,
)
from .forecast_dto import (
    ClearForecastResponseDTO,
    ForecastArtifactDTO,
    ForecastMetadataDTO,
    ForecastPointDTO,
)
from .training_dto import (
    ProgressLogEntryDTO,
    RetrainProgressDTO,
    RetrainRequestDTO,
    RetrainResponseDTO,
    TrainingServiceResponseDTO,
)
from .upload_dto import (
    AccuracyDTO,
    ClearUploadsResponseDTO,
    DateRangeDTO,
    DuplicateUploadDTO,
    ForecastSummaryDTO,
    TrainingMetricsDTO,
    TrainingResultDTO,
    UploadRecordDTO,
    UploadResponseDTO,
    UploadValidationErrorDTO,
)

__all__ = [
    "AccuracyDTO",
    "BillBreakdownDTO",
    "BillCalculationRequestDTO",
    "BillingPeriodDTO",
    "ClearForecastResponseDTO",
    "ClearUploadsResponseDTO",
    "DateRangeDTO",
    "DuplicateUploadDTO",
    "ForecastArtifactDTO",
    "ForecastMetadataDTO",
    "ForecastPointDTO",
    "ForecastSummaryDTO",
    "PricingTierDTO",
    "ProgressLogEntryDTO",
    "RetrainProgressDTO",
    "RetrainRequestDTO",
    "RetrainResponseDTO",
    "TrainingMetricsDTO",
    "TrainingResultDTO",
    "TrainingServiceResponseDTO",
    "UploadRecordDTO",
    "UploadResponseDTO",
    "UploadValidationErrorDTO",
]
