"""Domain entities for tiered water billing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class PricingTier:
    """Price per m³ charged for the volume between ``min_volume`` and ``max_volume``."""

    min_volume: float
    max_volume: Optional[float]
    price_per_unit: float


@dataclass
class PricingSettings:
    tiers: List[PricingTier] = field(default_factory=list)
    operational_cost: float = 0.0
    payment_due_day: int = 20


@dataclass(frozen=True, slots=True)
class BillBreakdown:
    volume_m3: float
    water_cost: int
    operational_cost: float
    total: float


@dataclass(frozen=True, slots=True)
class BillingPeriod:
    start_date: date
    end_date: date
    days_remaining: int
