"""Domain entities for the forecast artifact produced by the training service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class ForecastPoint:
    """
    One predicted period with its confidence band.

    ``period`` is a day (``2026-01-07``), an ISO week range
    (``2026-01-05/2026-01-11``) or a month (``2026-01``).
    """

    period: str
    value: float
    lower: float
    upper: float


@dataclass
class ForecastMetadata:
    model: str
    trained_on: str
    prediction_date: str
    unit: str = "liters"
    note: Optional[str] = None
    evaluation: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ForecastArtifact:
    """The authoritative daily/weekly/monthly forecast bundle."""

    daily: List[ForecastPoint]
    weekly: List[ForecastPoint]
    monthly: List[ForecastPoint]
    metadata: ForecastMetadata
