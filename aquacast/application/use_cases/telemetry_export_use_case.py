"""
Application Use Cases - Telemetry Export

Downloads aggregated consumption from the time-series storage as a
``date``/``total_m3`` workbook, the same layout accepted by uploads.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import structlog

from aquacast.domain.entities.consumption import Granularity
from aquacast.domain.gateways.telemetry_gateway import ITelemetryGateway
from aquacast.domain.ports.dataset_codec import IDatasetCodec

logger = structlog.get_logger(__name__)

_RANGE_PATTERN = re.compile(r"^-(\d+)([hdw])$")
_RANGE_UNITS = {"h": "hours", "d": "days", "w": "weeks"}


def parse_relative_range(value: str) -> timedelta:
    """
    Parse a relative range such as ``-30d``, ``-12h`` or ``-2w``.

    Raises:
        ValueError: If the value is not a negative relative range.
    """
    match = _RANGE_PATTERN.match(value.strip())
    if not match or int(match.group(1)) <= 0:
        raise ValueError(
            f"Invalid range {value!r}; expected e.g. -30d, -12h or -2w"
        )
    return timedelta(**{_RANGE_UNITS[match.group(2)]: int(match.group(1))})


class TelemetryExportUseCase:
    """Use case exporting live telemetry for download."""

    def __init__(
        self,
        telemetry_gateway: ITelemetryGateway,
        dataset_codec: IDatasetCodec,
        default_device_id: str = "water_meter_01",
    ):
        self.telemetry_gateway = telemetry_gateway
        self.dataset_codec = dataset_codec
        self.default_device_id = default_device_id

    async def execute(
        self,
        range_: str = "-30d",
        granularity: Granularity = Granularity.DAILY,
        device_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[bytes, str, int]:
        """
        Export telemetry as a workbook.

        Returns:
            Workbook bytes, download file name and number of exported rows

        Raises:
            ValueError: If ``range_`` cannot be parsed
            TelemetryExportUnavailableError: If the storage cannot be queried
        """
        window = parse_relative_range(range_)
        now = now or datetime.now(timezone.utc)
        device = device_id or self.default_device_id

        records = await self.telemetry_gateway.export_range(
            device_id=device,
            start=now - window,
            granularity=granularity,
            end=now,
        )
        content = self.dataset_codec.write_workbook(records)

        if records:
            file_name = (
                f"water_export_{records[0].date}_to_{records[-1].date}.xlsx"
            )
        else:
            file_name = f"water_export_empty_{now.date().isoformat()}.xlsx"

        logger.info(
            "Telemetry exported",
            device_id=device,
            range=range_,
            granularity=granularity.value,
            rows=len(records),
        )
        return content, file_name, len(records)
