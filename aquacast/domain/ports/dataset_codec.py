"""Domain port for reading and writing tabular consumption files."""

from __future__ import annotations

from typing import Any, List, Protocol, Sequence, Tuple

from aquacast.domain.entities.consumption import ConsumptionRecord, Granularity

Table = Tuple[List[Any], List[List[Any]]]


class IDatasetCodec(Protocol):
    """Converts between file bytes and raw tables or consumption records."""

    def supports(self, file_name: str) -> bool:
        """Whether the file extension can be read."""
        ...

    def read_table(self, content: bytes, file_name: str) -> Table:
        """Return ``(header, rows)`` of the first sheet or the CSV body.

        Raises:
            UnsupportedUploadError: If the content cannot be read.
        """
        ...

    def write_workbook(self, records: Sequence[ConsumptionRecord]) -> bytes:
        """Encode records as a single-sheet ``date``/``total_m3`` workbook."""
        ...

    def write_template(self, granularity: Granularity) -> bytes:
        """Encode the downloadable upload template for a granularity."""
        ...
