from __future__ import annotations

from datetime import date, datetime

import pytest

from aquacast.domain.entities.consumption import ConsumptionRecord, Granularity
from aquacast.domain.services.dataset_normalizer import (
    normalize_dataset,
    parse_date,
    parse_volume,
)


def test_daily_table_is_normalized() -> None:
    result = normalize_dataset(
        ["date", "total_m3"], [["2025-01-01", "1.5"], ["2025-01-02", "2.0"]]
    )

    assert result.valid is True
    assert result.errors == []
    assert result.data_type == Granularity.DAILY
    assert result.records == [
        ConsumptionRecord(date="2025-01-01", volume=1.5),
        ConsumptionRecord(date="2025-01-02", volume=2.0),
    ]
    assert result.row_count == 2


def test_missing_volume_column_is_fatal() -> None:
    result = normalize_dataset(["date", "amount"], [["2025-01-01", "1.5"]])

    assert result.valid is False
    assert any("total_m3" in error for error in result.errors)
    assert result.records == []


def test_missing_header_reports_no_data() -> None:
    result = normalize_dataset(None, [])

    assert result.valid is False
    assert result.errors == ["No data found in file"]


def test_header_aliases_are_case_insensitive() -> None:
    result = normalize_dataset([" Tanggal ", "Volume"], [["2025-03", "22"]])

    assert result.valid is True
    assert result.data_type == Granularity.MONTHLY
    assert result.records == [ConsumptionRecord(date="2025-03", volume=22.0)]


def test_custom_column_aliases() -> None:
    result = normalize_dataset(
        ["fecha", "litros"],
        [["2025-01-01", "4"]],
        date_columns=["fecha"],
        volume_columns=["litros"],
    )

    assert result.valid is True


def test_invalid_rows_become_warnings() -> None:
    rows = [
        ["2025-01-02", "2.0"],
        [None, None],
        ["not a date", "1"],
        ["2025-01-03", "abc"],
        ["2025-01-04", "-3"],
        ["2025-02", "5"],
        ["2025-01-01", "1.5"],
    ]

    result = normalize_dataset(["date", "total_m3"], rows)

    assert result.valid is True
    assert [r.date for r in result.records] == ["2025-01-01", "2025-01-02"]
    assert result.warnings[0] == "Row 3: Empty row, skipping"
    assert result.warnings[1].startswith("Row 4: Invalid or missing date")
    assert "Row 5" in result.warnings[2] and "total_m3" in result.warnings[2]
    assert "Negative" in result.warnings[3]
    assert "Inconsistent date format" in result.warnings[4]


def test_duplicate_dates_are_kept_in_file_order() -> None:
    rows = [["2025-01-01", "1"], ["2025-01-01", "2"]]

    result = normalize_dataset(["date", "total_m3"], rows)

    assert result.valid is True
    assert [r.volume for r in result.records] == [1.0, 2.0]
    assert result.warnings == ["Row 3: Duplicate date 2025-01-01"]


def test_no_valid_rows_is_fatal() -> None:
    result = normalize_dataset(["date", "total_m3"], [["x", "y"]])

    assert result.valid is False
    assert "No valid data rows found" in result.errors


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-01-05", ("2025-01-05", Granularity.DAILY)),
        ("2025-1-5 00:00:00", ("2025-01-05", Granularity.DAILY)),
        ("2025-01", ("2025-01", Granularity.MONTHLY)),
        ("05/01/2025", ("2025-01-05", Granularity.DAILY)),
        ("1/2025", ("2025-01", Granularity.MONTHLY)),
        (45658, ("2025-01-01", Granularity.DAILY)),
        (datetime(2025, 1, 5, 13, 0), ("2025-01-05", Granularity.DAILY)),
        (date(2025, 1, 5), ("2025-01-05", Granularity.DAILY)),
        ("2025-13", None),
        ("2025-02-30", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_date(value, expected) -> None:
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.5", 1.5),
        ("2,5", 2.5),
        ("1.234,5", 1234.5),
        ("1,234.5", 1234.5),
        ("1,234,567", 1234567.0),
        ("1.234.567", 1234567.0),
        (" 3 ", 3.0),
        (7, 7.0),
        ("abc", None),
        (float("nan"), None),
        (None, None),
    ],
)
def test_parse_volume(value, expected) -> None:
    assert parse_volume(value) == expected
