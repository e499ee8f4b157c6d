from __future__ import annotations

from datetime import date

import pytest

from aquacast.application.dtos.billing_dto import BillCalculationRequestDTO
from aquacast.application.use_cases.billing_use_case import BillingUseCase
from aquacast.domain.entities.pricing import PricingSettings, PricingTier
from aquacast.presentation.controllers.billing_controller import (
    calculate_bill,
    get_billing_period,
    list_price_tiers,
)


@pytest.fixture()
def billing_use_case() -> BillingUseCase:
    return BillingUseCase(
        PricingSettings(
            tiers=[PricingTier(min_volume=0, max_volume=None, price_per_unit=3000)],
            operational_cost=5000,
            payment_due_day=20,
        )
    )


@pytest.mark.asyncio
async def test_calculate_bill(billing_use_case) -> None:
    bill = await calculate_bill(
        BillCalculationRequestDTO(volume_liters=2000),
        billing_use_case=billing_use_case,
    )

    assert bill.water_cost == 6000
    assert bill.total == 11000


@pytest.mark.asyncio
async def test_billing_period(billing_use_case) -> None:
    period = await get_billing_period(billing_use_case=billing_use_case)

    assert period.payment_due_day == 20
    assert period.start_date <= date.today() <= period.end_date


@pytest.mark.asyncio
async def test_list_price_tiers(billing_use_case) -> None:
    tiers = await list_price_tiers(billing_use_case=billing_use_case)

    assert [t.price_per_unit for t in tiers] == [3000]
