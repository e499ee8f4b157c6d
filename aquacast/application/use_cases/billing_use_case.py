"""Application use case for tiered water billing."""

from datetime import date
from typing import List, Optional

from aquacast.application.dtos.billing_dto import (
    BillBreakdownDTO,
    BillCalculationRequestDTO,
    BillingPeriodDTO,
    PricingTierDTO,
)
from aquacast.domain.entities.pricing import PricingSettings
from aquacast.domain.services.billing import calculate_total_bill, get_billing_period


class BillingUseCase:
    """Computes bills and billing periods from the configured tariff."""

    def __init__(self, pricing_settings: PricingSettings):
        self.pricing_settings = pricing_settings

    def calculate(self, request: BillCalculationRequestDTO) -> BillBreakdownDTO:
        bill = calculate_total_bill(request.volume_liters, self.pricing_settings)
        return BillBreakdownDTO(
            volume_liters=request.volume_liters,
            volume_m3=bill.volume_m3,
            water_cost=bill.water_cost,
            operational_cost=bill.operational_cost,
            total=bill.total,
        )

    def current_period(self, today: Optional[date] = None) -> BillingPeriodDTO:
        due_day = self.pricing_settings.payment_due_day
        period = get_billing_period(due_day, today)
        return BillingPeriodDTO(
            start_date=period.start_date,
            end_date=period.end_date,
            days_remaining=period.days_remaining,
            payment_due_day=due_day,
        )

    def tiers(self) -> List[PricingTierDTO]:
        return [
            PricingTierDTO(
                min_volume=tier.min_volume,
                max_volume=tier.max_volume,
                price_per_unit=tier.price_per_unit,
            )
            for tier in sorted(self.pricing_settings.tiers, key=lambda t: t.min_volume)
        ]
