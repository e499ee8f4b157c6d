"""
Domain Service - Billing

Tiered water tariff calculation and billing period resolution. Volumes come
in liters and are billed per m³.
"""

import math
from datetime import date, timedelta
from typing import Optional, Sequence

from aquacast.domain.entities.pricing import (
    BillBreakdown,
    BillingPeriod,
    PricingSettings,
    PricingTier,
)

LITERS_PER_M3 = 1000.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_water_cost(volume_liters: float, tiers: Sequence[PricingTier]) -> int:
    """
    Charge each tier for the slice of volume falling inside it.

    Tiers are applied in ascending ``min_volume`` order; an open ``max_volume``
    extends to infinity. The result is rounded to whole currency units.
    """
    volume_m3 = volume_liters / LITERS_PER_M3
    remaining = volume_m3
    total = 0.0

    for tier in sorted(tiers, key=lambda t: t.min_volume):
        if remaining <= 0:
            break
        tier_max = math.inf if tier.max_volume is None else tier.max_volume
        if volume_m3 <= tier.min_volume:
            continue
        if volume_m3 > tier_max:
            in_tier = tier_max - tier.min_volume
        else:
            in_tier = volume_m3 - tier.min_volume
        total += in_tier * tier.price_per_unit
        remaining -= in_tier

    return _round_half_up(total)


def calculate_total_bill(
    volume_liters: float, settings: PricingSettings
) -> BillBreakdown:
    water_cost = calculate_water_cost(volume_liters, settings.tiers)
    return BillBreakdown(
        volume_m3=volume_liters / LITERS_PER_M3,
        water_cost=water_cost,
        operational_cost=settings.operational_cost,
        total=water_cost + settings.operational_cost,
    )


def _shift_month(year: int, month: int, delta: int) -> tuple:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def get_billing_period(
    payment_due_day: int, today: Optional[date] = None
) -> BillingPeriod:
    """
    Resolve the billing period containing ``today``.

    A period starts on the due day and ends the day before the next month's
    due day. ``payment_due_day`` must be between 1 and 28.
    """
    if not 1 <= payment_due_day <= 28:
        raise ValueError("payment_due_day must be between 1 and 28")

    today = today or date.today()
    if today.day >= payment_due_day:
        start = date(today.year, today.month, payment_due_day)
    else:
        year, month = _shift_month(today.year, today.month, -1)
        start = date(year, month, payment_due_day)

    next_year, next_month = _shift_month(start.year, start.month, 1)
    end = date(next_year, next_month, payment_due_day) - timedelta(days=1)

    return BillingPeriod(
        start_date=start,
        end_date=end,
        days_remaining=max(0, (end - today).days),
    )
