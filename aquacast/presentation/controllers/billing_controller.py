"""
Presentation Layer - Billing Controller

This module contains the FastAPI controller for tiered water billing.
"""

from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from aquacast.application.dtos.billing_dto import (
    BillBreakdownDTO,
    BillCalculationRequestDTO,
    BillingPeriodDTO,
    PricingTierDTO,
)
from aquacast.application.use_cases.billing_use_case import BillingUseCase
from aquacast.main.container import AppContainer

router = APIRouter(prefix="/billing", tags=["billing"])


@router.post(
    "/calculate",
    response_model=BillBreakdownDTO,
    summary="Calculate a water bill",
    description="Tiered water cost plus the fixed operational cost for a volume in liters.",
)
@inject
async def calculate_bill(
    request: BillCalculationRequestDTO,
    billing_use_case: BillingUseCase = Depends(Provide[AppContainer.billing_use_case]),
) -> BillBreakdownDTO:
    return billing_use_case.calculate(request)


@router.get(
    "/period",
    response_model=BillingPeriodDTO,
    summary="Get current billing period",
)
@inject
async def get_billing_period(
    billing_use_case: BillingUseCase = Depends(Provide[AppContainer.billing_use_case]),
) -> BillingPeriodDTO:
    return billing_use_case.current_period()


@router.get(
    "/tiers",
    response_model=List[PricingTierDTO],
    summary="List price tiers",
)
@inject
async def list_price_tiers(
    billing_use_case: BillingUseCase = Depends(Provide[AppContainer.billing_use_case]),
) -> List[PricingTierDTO]:
    return billing_use_case.tiers()
