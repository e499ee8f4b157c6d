"""Application DTOs for the current forecast artifact."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from aquacast.domain.entities.forecast import ForecastArtifact, ForecastPoint


class ForecastPointDTO(BaseModel):
    period: str
    value: float
    lower: float
    upper: float


class ForecastMetadataDTO(BaseModel):
    model: str
    trained_on: str
    prediction_date: str
    unit: str = "liters"
    note: Optional[str] = None
    evaluation: Dict[str, Any] = Field(default_factory=dict)


class ForecastArtifactDTO(BaseModel):
    """DTO for the daily, weekly and monthly forecast."""

    daily: List[ForecastPointDTO]
    weekly: List[ForecastPointDTO]
    monthly: List[ForecastPointDTO]
    metadata: ForecastMetadataDTO

    @staticmethod
    def _points(points: List[ForecastPoint]) -> List[ForecastPointDTO]:
        return [
            ForecastPointDTO(
                period=p.period, value=p.value, lower=p.lower, upper=p.upper
            )
            for p in points
        ]

    @classmethod
    def from_entity(cls, artifact: ForecastArtifact) -> "ForecastArtifactDTO":
        return cls(
            daily=cls._points(artifact.daily),
            weekly=cls._points(artifact.weekly),
            monthly=cls._points(artifact.monthly),
            metadata=ForecastMetadataDTO(
                model=artifact.metadata.model,
                trained_on=artifact.metadata.trained_on,
                prediction_date=artifact.metadata.prediction_date,
                unit=artifact.metadata.unit,
                note=artifact.metadata.note,
                evaluation=artifact.metadata.evaluation,
            ),
        )


class ClearForecastResponseDTO(BaseModel):
    cleared: bool
    message: str
