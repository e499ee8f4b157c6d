from __future__ import annotations

from datetime import date

from aquacast.application.dtos.billing_dto import BillCalculationRequestDTO
from aquacast.application.use_cases.billing_use_case import BillingUseCase
from aquacast.domain.entities.pricing import PricingSettings, PricingTier

SETTINGS = PricingSettings(
    tiers=[
        PricingTier(min_volume=20, max_volume=None, price_per_unit=6000),
        PricingTier(min_volume=0, max_volume=10, price_per_unit=3000),
        PricingTier(min_volume=10, max_volume=20, price_per_unit=4500),
    ],
    operational_cost=5000,
    payment_due_day=20,
)


def test_calculate() -> None:
    bill = BillingUseCase(SETTINGS).calculate(
        BillCalculationRequestDTO(volume_liters=15000)
    )

    assert bill.volume_liters == 15000
    assert bill.volume_m3 == 15.0
    assert bill.water_cost == 52500
    assert bill.operational_cost == 5000
    assert bill.total == 57500


def test_current_period() -> None:
    period = BillingUseCase(SETTINGS).current_period(today=date(2025, 3, 25))

    assert period.start_date == date(2025, 3, 20)
    assert period.end_date == date(2025, 4, 19)
    assert period.payment_due_day == 20


def test_tiers_are_sorted() -> None:
    tiers = BillingUseCase(SETTINGS).tiers()

    assert [t.min_volume for t in tiers] == [0, 10, 20]
    assert tiers[-1].max_volume is None
