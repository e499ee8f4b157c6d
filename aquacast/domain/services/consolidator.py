"""Domain service merging uploaded history with exported telemetry."""

from typing import List, Sequence

import pandas as pd

from aquacast.domain.entities.consumption import ConsumptionRecord
from aquacast.shared.consts import DATE_COLUMN, VOLUME_COLUMN


def records_to_frame(records: Sequence[ConsumptionRecord]) -> pd.DataFrame:
    """Build a two-column ``date``/``total_m3`` frame from records."""
    return pd.DataFrame(
        {
            DATE_COLUMN: [record.date for record in records],
            VOLUME_COLUMN: [float(record.volume) for record in records],
        },
        columns=[DATE_COLUMN, VOLUME_COLUMN],
    )


def frame_to_records(frame: pd.DataFrame) -> List[ConsumptionRecord]:
    return [
        ConsumptionRecord(date=str(row[DATE_COLUMN]), volume=float(row[VOLUME_COLUMN]))
        for row in frame.to_dict(orient="records")
    ]


def consolidate(
    primary: Sequence[ConsumptionRecord],
    secondary: Sequence[ConsumptionRecord],
) -> List[ConsumptionRecord]:
    """
    Merge two record sequences into one dataset keyed by date.

    ``secondary`` is appended after ``primary`` and the last occurrence of a
    date wins, so secondary values override primary ones and later rows
    override earlier rows of the same sequence. Keys are compared as exact
    strings; ``2025-01`` and ``2025-01-01`` never collide. The result is
    sorted ascending by date.
    """
    frame = pd.concat(
        [records_to_frame(primary), records_to_frame(secondary)],
        ignore_index=True,
    )
    if frame.empty:
        return []

    frame = frame.drop_duplicates(subset=DATE_COLUMN, keep="last")
    frame = frame.sort_values(DATE_COLUMN, kind="stable").reset_index(drop=True)
    return frame_to_records(frame)
