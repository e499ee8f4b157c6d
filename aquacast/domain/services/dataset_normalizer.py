"""
Domain Service - Dataset Normalizer

Turns a raw table (header row plus data rows) into ``ConsumptionRecord``
values. Structural problems are reported as errors; problems with single rows
are reported as warnings and the row is dropped. Nothing is raised.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Sequence, Tuple

from aquacast.domain.entities.consumption import ConsumptionRecord, Granularity
from aquacast.shared.consts import DATE_COLUMN, VOLUME_COLUMN

DEFAULT_DATE_COLUMNS: Tuple[str, ...] = ("date", "tanggal", "period", "month", "day")
DEFAULT_VOLUME_COLUMNS: Tuple[str, ...] = (
    "total_m3",
    "volume",
    "volume_m3",
    "consumption",
    "m3",
)

# Spreadsheet serial dates (1900 date system, including the leap-year bug)
SERIAL_EPOCH = date(1899, 12, 30)

_ISO_DAY = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[ T].*)?$")
_ISO_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_SLASH_DAY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_SLASH_MONTH = re.compile(r"^(\d{1,2})/(\d{4})$")
_SERIAL = re.compile(r"^\d+(?:\.\d+)?$")


@dataclass
class NormalizationResult:
    """Outcome of normalizing one table."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    data_type: Granularity = Granularity.DAILY
    records: List[ConsumptionRecord] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.records)


def _month_key(year: int, month: int) -> Optional[str]:
    if not 1 <= month <= 12:
        return None
    return f"{year:04d}-{month:02d}"


def _day_key(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _from_serial(serial: float) -> Optional[str]:
    if serial <= 0 or math.isnan(serial) or math.isinf(serial):
        return None
    try:
        return (SERIAL_EPOCH + timedelta(days=int(serial))).isoformat()
    except OverflowError:
        return None


def parse_date(value: Any) -> Optional[Tuple[str, Granularity]]:
    """
    Parse a cell into an ISO day or ISO month key.

    Returns:
        ``(key, granularity)`` or ``None`` when the value is not a date.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat(), Granularity.DAILY
    if isinstance(value, date):
        return value.isoformat(), Granularity.DAILY
    if isinstance(value, (int, float)):
        key = _from_serial(float(value))
        return (key, Granularity.DAILY) if key else None

    text = str(value).strip()
    if not text:
        return None

    key: Optional[str] = None
    granularity = Granularity.DAILY
    if match := _ISO_DAY.match(text):
        year, month, day = (int(part) for part in match.groups()[:3])
        key = _day_key(year, month, day)
    elif match := _ISO_MONTH.match(text):
        key = _month_key(int(match.group(1)), int(match.group(2)))
        granularity = Granularity.MONTHLY
    elif match := _SLASH_DAY.match(text):
        day, month, year = (int(part) for part in match.groups())
        key = _day_key(year, month, day)
    elif match := _SLASH_MONTH.match(text):
        key = _month_key(int(match.group(2)), int(match.group(1)))
        granularity = Granularity.MONTHLY
    elif _SERIAL.match(text):
        key = _from_serial(float(text))

    return (key, granularity) if key else None


def parse_volume(value: Any) -> Optional[float]:
    """
    Parse a volume cell, accepting ``1.234,5``, ``1,234.5`` and ``2,5``.

    When both separators appear the last one is the decimal mark. A single
    kind of separator repeated more than once is a thousands separator,
    otherwise it is the decimal mark.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) or math.isinf(number) else number

    text = str(value).strip().replace(" ", "").replace("\u00a0", "")
    if not text:
        return None

    has_comma, has_dot = "," in text, "." in text
    if has_comma and has_dot:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif has_comma:
        text = text.replace(",", "") if text.count(",") > 1 else text.replace(",", ".")
    elif has_dot and text.count(".") > 1:
        text = text.replace(".", "")

    try:
        number = float(text)
    except ValueError:
        return None
    return None if math.isnan(number) or math.isinf(number) else number


def _find_column(headers: List[str], aliases: Sequence[str]) -> Optional[int]:
    for alias in aliases:
        alias = alias.strip().lower()
        if alias in headers:
            return headers.index(alias)
    return None


def normalize_dataset(
    header: Optional[Sequence[Any]],
    rows: Sequence[Sequence[Any]],
    date_columns: Sequence[str] = DEFAULT_DATE_COLUMNS,
    volume_columns: Sequence[str] = DEFAULT_VOLUME_COLUMNS,
) -> NormalizationResult:
    """
    Normalize a raw table into sorted consumption records.

    Args:
        header: Header row; matched case-insensitively against the aliases.
        rows: Data rows, in file order.
        date_columns: Accepted spellings of the date column.
        volume_columns: Accepted spellings of the volume column.

    Returns:
        NormalizationResult with ``valid`` false on any fatal error.
    """
    result = NormalizationResult(valid=False)

    if not header:
        result.errors.append("No data found in file")
        return result

    headers = [str(cell).strip().lower() if cell is not None else "" for cell in header]
    date_index = _find_column(headers, date_columns)
    volume_index = _find_column(headers, volume_columns)
    if date_index is None:
        result.errors.append(f"Missing required column: {DATE_COLUMN}")
    if volume_index is None:
        result.errors.append(f"Missing required column: {VOLUME_COLUMN}")
    if result.errors:
        return result

    data_type: Optional[Granularity] = None
    seen_dates = set()
    records: List[ConsumptionRecord] = []

    # Row numbers are reported 1-based with the header as row 1
    for offset, row in enumerate(rows, start=2):
        if not row or all(cell is None or str(cell).strip() == "" for cell in row):
            result.warnings.append(f"Row {offset}: Empty row, skipping")
            continue

        date_value = row[date_index] if date_index < len(row) else None
        volume_value = row[volume_index] if volume_index < len(row) else None

        parsed = parse_date(date_value)
        if parsed is None:
            result.warnings.append(
                f"Row {offset}: Invalid or missing date value {date_value!r}, skipping"
            )
            continue
        key, granularity = parsed

        if data_type is None:
            data_type = granularity
        elif granularity != data_type:
            result.warnings.append(
                f"Row {offset}: Inconsistent date format. Expected "
                f"{data_type.value}, got {granularity.value}, skipping"
            )
            continue

        volume = parse_volume(volume_value)
        if volume is None:
            result.warnings.append(
                f"Row {offset}: Invalid {VOLUME_COLUMN} value {volume_value!r}, skipping"
            )
            continue
        if volume < 0:
            result.warnings.append(
                f"Row {offset}: Negative {VOLUME_COLUMN} value not allowed, skipping"
            )
            continue

        if key in seen_dates:
            result.warnings.append(f"Row {offset}: Duplicate date {key}")
        seen_dates.add(key)
        records.append(ConsumptionRecord(date=key, volume=volume))

    if data_type is not None:
        result.data_type = data_type

    if not records:
        result.errors.append("No valid data rows found")
        return result

    # Stable sort keeps duplicate dates in file order
    result.records = sorted(records, key=lambda record: record.date)
    result.valid = True
    return result
