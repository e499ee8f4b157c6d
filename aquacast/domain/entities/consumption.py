"""Domain entities for consumption datasets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Granularity(str, Enum):
    """Whether a record covers one calendar day or one calendar month."""

    DAILY = "daily"
    MONTHLY = "monthly"


@dataclass(frozen=True, slots=True)
class ConsumptionRecord:
    """Volume consumed (m³) during the day ``YYYY-MM-DD`` or month ``YYYY-MM``."""

    date: str
    volume: float

    @property
    def granularity(self) -> Granularity:
        return Granularity.DAILY if len(self.date) == 10 else Granularity.MONTHLY


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive span of ISO date keys covered by a dataset."""

    start: str
    end: str
