"""Application DTOs for tiered billing."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class BillCalculationRequestDTO(BaseModel):
    volume_liters: float = Field(ge=0, description="Consumed volume in liters")


class BillBreakdownDTO(BaseModel):
    """DTO for a computed bill."""

    volume_liters: float
    volume_m3: float
    water_cost: int
    operational_cost: float
    total: float


class PricingTierDTO(BaseModel):
    min_volume: float
    max_volume: Optional[float] = None
    price_per_unit: float


class BillingPeriodDTO(BaseModel):
    start_date: date
    end_date: date
    days_remaining: int
    payment_due_day: int
