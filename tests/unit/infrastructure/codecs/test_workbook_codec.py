from __future__ import annotations

import io

import pytest
from openpyxl import load_workbook

from aquacast.domain.entities.consumption import ConsumptionRecord, Granularity
from aquacast.domain.entities.errors import UnsupportedUploadError
from aquacast.infrastructure.codecs.workbook_codec import WorkbookCodec


@pytest.fixture()
def codec() -> WorkbookCodec:
    return WorkbookCodec()


@pytest.mark.parametrize(
    "file_name, supported",
    [("a.xlsx", True), ("A.CSV", True), ("a.xls", False), ("a", False)],
)
def test_supports(codec, file_name, supported) -> None:
    assert codec.supports(file_name) is supported


def test_read_csv_with_bom_and_semicolons(codec) -> None:
    content = "\ufeffdate;total_m3\n2025-01-01;1,5\n2025-01-02;2\n".encode("utf-8")

    header, rows = codec.read_table(content, "history.csv")

    assert header == ["date", "total_m3"]
    assert rows == [["2025-01-01", "1,5"], ["2025-01-02", "2"]]


def test_read_xlsx_first_sheet(codec) -> None:
    content = codec.write_workbook([ConsumptionRecord(date="2025-01-01", volume=1.5)])

    header, rows = codec.read_table(content, "history.xlsx")

    assert header == ["date", "total_m3"]
    assert rows == [["2025-01-01", 1.5]]


def test_empty_csv(codec) -> None:
    assert codec.read_table(b"\n", "history.csv") == ([], [])


def test_corrupt_workbook(codec) -> None:
    with pytest.raises(UnsupportedUploadError) as exc_info:
        codec.read_table(b"not a zip file", "history.xlsx")

    assert exc_info.value.message == "File could not be read as an Excel workbook"


def test_unknown_extension(codec) -> None:
    with pytest.raises(UnsupportedUploadError):
        codec.read_table(b"x", "history.json")


def test_write_workbook_layout(codec) -> None:
    content = codec.write_workbook(
        [
            ConsumptionRecord(date="2025-01-01", volume=1.5),
            ConsumptionRecord(date="2025-01-02", volume=2.0),
        ]
    )

    workbook = load_workbook(io.BytesIO(content))
    assert workbook.sheetnames == ["Data"]
    values = list(workbook["Data"].iter_rows(values_only=True))
    assert values == [("date", "total_m3"), ("2025-01-01", 1.5), ("2025-01-02", 2.0)]


@pytest.mark.parametrize(
    "granularity, first_period, title",
    [
        (Granularity.DAILY, "2025-12-01", "DAILY DATA TEMPLATE (RECOMMENDED)"),
        (Granularity.MONTHLY, "2026-01", "MONTHLY DATA TEMPLATE"),
    ],
)
def test_template(codec, granularity, first_period, title) -> None:
    workbook = load_workbook(io.BytesIO(codec.write_template(granularity)))

    assert workbook.sheetnames == ["Data", "Instructions"]
    data = list(workbook["Data"].iter_rows(values_only=True))
    assert data[0] == ("date", "total_m3")
    assert data[1][0] == first_period
    assert workbook["Instructions"]["A1"].value == title
