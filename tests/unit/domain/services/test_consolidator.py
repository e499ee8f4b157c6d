from __future__ import annotations

from aquacast.domain.entities.consumption import ConsumptionRecord
from aquacast.domain.services.consolidator import consolidate


def test_secondary_overrides_primary_on_same_date() -> None:
    primary = [
        ConsumptionRecord(date="2025-01-01", volume=1.5),
        ConsumptionRecord(date="2025-01-02", volume=2.0),
    ]
    secondary = [ConsumptionRecord(date="2025-01-01", volume=1.8)]

    assert consolidate(primary, secondary) == [
        ConsumptionRecord(date="2025-01-01", volume=1.8),
        ConsumptionRecord(date="2025-01-02", volume=2.0),
    ]


def test_result_is_sorted_and_unique() -> None:
    primary = [
        ConsumptionRecord(date="2025-01-03", volume=3.0),
        ConsumptionRecord(date="2025-01-01", volume=1.0),
        ConsumptionRecord(date="2025-01-01", volume=1.1),
    ]

    result = consolidate(primary, [])

    assert [r.date for r in result] == ["2025-01-01", "2025-01-03"]
    assert result[0].volume == 1.1


def test_day_and_month_keys_never_collide() -> None:
    result = consolidate(
        [ConsumptionRecord(date="2025-01", volume=30.0)],
        [ConsumptionRecord(date="2025-01-01", volume=1.0)],
    )

    assert [r.date for r in result] == ["2025-01", "2025-01-01"]


def test_empty_inputs() -> None:
    assert consolidate([], []) == []
