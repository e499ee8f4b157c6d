"""
Application DTOs - Training

DTOs for retrain requests, their results and progress, plus the strict
decoder of the external training service response.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from aquacast.application.dtos.upload_dto import TrainingResultDTO
from aquacast.domain.entities.retrain_progress import (
    LogLevel,
    RetrainPhase,
    RetrainProgress,
)
from aquacast.domain.entities.upload import UploadStatus


class RetrainRequestDTO(BaseModel):
    """DTO for retrain request."""

    use_telemetry: bool = Field(
        default=True,
        description="Merge the trailing window of live telemetry into the dataset",
    )


class RetrainResponseDTO(BaseModel):
    """DTO for a completed retrain."""

    upload_id: UUID
    status: UploadStatus
    message: str = "Training completed successfully"
    training_result: TrainingResultDTO
    forecast_saved: bool = True
    upload_records: int = 0
    telemetry_records: int = 0
    total_records: int = 0


class ProgressLogEntryDTO(BaseModel):
    timestamp: datetime
    level: LogLevel
    message: str


class RetrainProgressDTO(BaseModel):
    """DTO for the live progress of a retrain."""

    upload_id: UUID
    phase: RetrainPhase
    progress: int
    current_step: str
    running: bool
    started_at: datetime
    finished_at: Optional[datetime] = None
    log: List[ProgressLogEntryDTO] = Field(default_factory=list)

    @classmethod
    def from_entity(
        cls, progress: RetrainProgress, running: bool
    ) -> "RetrainProgressDTO":
        return cls(
            upload_id=progress.upload_id,
            phase=progress.phase,
            progress=progress.progress,
            current_step=progress.current_step,
            running=running,
            started_at=progress.started_at,
            finished_at=progress.finished_at,
            log=[
                ProgressLogEntryDTO(
                    timestamp=entry.timestamp,
                    level=entry.level,
                    message=entry.message,
                )
                for entry in progress.log
            ],
        )


# Training service wire format


class RemoteForecastPointDTO(BaseModel):
    """One point as returned by the training service (volumes in liters)."""

    model_config = ConfigDict(extra="ignore")

    period: str = Field(validation_alias=AliasChoices("date", "week", "month", "period"))
    value: float = Field(validation_alias=AliasChoices("volumeInLiters", "value"))
    lower: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("volumeInLiters_lower", "lower")
    )
    upper: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("volumeInLiters_upper", "upper")
    )


class RemoteMetricsDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mae: float
    rmse: float
    mape: float
    train_size: int = Field(validation_alias=AliasChoices("train_size", "trainSize"))
    test_size: int = Field(validation_alias=AliasChoices("test_size", "testSize"))


class RemoteMetadataDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    model: str = "unknown"
    trained_on: str = ""
    prediction_date: str = ""
    unit: str = "liters"
    note: Optional[str] = None


class TrainingServiceResponseDTO(BaseModel):
    """
    Strict decoder of a successful ``/api/train`` response.

    The forecast arrays and every metric are required. Metrics may sit at
    the top level or under ``metadata.metrics``, and the whole payload may be
    wrapped in a ``{"data": {...}}`` envelope.
    """

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    daily: List[RemoteForecastPointDTO]
    weekly: List[RemoteForecastPointDTO]
    monthly: List[RemoteForecastPointDTO]
    metrics: RemoteMetricsDTO
    metadata: RemoteMetadataDTO = Field(default_factory=RemoteMetadataDTO)

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, payload: Any) -> Any:
        if not isinstance(payload, dict):
            return payload
        if "daily" not in payload and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        payload = dict(payload)
        metadata = payload.get("metadata")
        if "metrics" not in payload and isinstance(metadata, dict):
            if isinstance(metadata.get("metrics"), dict):
                payload["metrics"] = metadata["metrics"]
        return payload

    def evaluation(self) -> Dict[str, Any]:
        """
        Accuracy metadata stored with the forecast.

        The decoded metrics, merged over a flattened ``metadata.evaluation``
        and any other extra metadata keys the service reported.
        """
        extra = dict(self.metadata.model_extra or {})
        nested = extra.pop("evaluation", None)
        extra.pop("metrics", None)
        if isinstance(nested, dict):
            extra.update(nested)
        extra.update(self.metrics.model_dump())
        return extra
