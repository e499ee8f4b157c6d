"""
Infrastructure Gateway - InfluxDB Telemetry Export

Exports per-day or per-month consumption from the InfluxDB v2 bucket fed by
the water meter. The meter reports a cumulative ``total_volume`` in liters;
consumption of a window is the spread of that counter inside the window.
"""

import csv
import io
from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx
import structlog

from aquacast.domain.entities.consumption import ConsumptionRecord, Granularity
from aquacast.domain.entities.errors import TelemetryExportUnavailableError
from aquacast.domain.gateways.telemetry_gateway import ITelemetryGateway

logger = structlog.get_logger(__name__)

LITERS_PER_M3 = 1000.0

_WINDOWS: Dict[Granularity, str] = {
    Granularity.DAILY: "1d",
    Granularity.MONTHLY: "1mo",
}
_KEY_LENGTH: Dict[Granularity, int] = {
    Granularity.DAILY: 10,
    Granularity.MONTHLY: 7,
}


def _flux_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class InfluxTelemetryGateway(ITelemetryGateway):
    """Implementation of the telemetry export over the InfluxDB v2 HTTP API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        org: str,
        bucket: str,
        measurement: str = "water_reading",
        field: str = "total_volume",
        timeout: float = 30.0,
    ):
        """
        Initialize the InfluxDB gateway.

        Args:
            base_url: Base URL of InfluxDB (e.g., "http://influxdb:8086")
            token: API token with read access to the bucket
            org: Organization owning the bucket
            bucket: Bucket holding the meter readings
            measurement: Measurement name of the readings
            field: Cumulative volume field in liters
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.org = org
        self.bucket = bucket
        self.measurement = measurement
        self.field = field
        self.timeout = timeout

    def build_query(
        self,
        device_id: str,
        start: datetime,
        stop: datetime,
        granularity: Granularity,
    ) -> str:
        return (
            f'from(bucket: "{_flux_string(self.bucket)}")\n'
            f"  |> range(start: {_rfc3339(start)}, stop: {_rfc3339(stop)})\n"
            f'  |> filter(fn: (r) => r._measurement == "{_flux_string(self.measurement)}")\n'
            f'  |> filter(fn: (r) => r.device_id == "{_flux_string(device_id)}")\n'
            f'  |> filter(fn: (r) => r._field == "{_flux_string(self.field)}")\n'
            f"  |> aggregateWindow(every: {_WINDOWS[granularity]}, fn: spread, "
            'createEmpty: false, timeSrc: "_start")\n'
            '  |> keep(columns: ["_time", "_value"])\n'
            '  |> sort(columns: ["_time"])'
        )

    async def export_range(
        self,
        device_id: str,
        start: datetime,
        granularity: Granularity,
        end: Optional[datetime] = None,
    ) -> List[ConsumptionRecord]:
        stop = end or datetime.now(timezone.utc)
        query = self.build_query(device_id, start, stop, granularity)
        url = f"{self.base_url}/api/v2/query"
        headers = {
            "Authorization": f"Token {self.token}",
            "Content-Type": "application/vnd.flux",
            "Accept": "application/csv",
        }

        logger.info(
            "Exporting telemetry from InfluxDB",
            url=url,
            device_id=device_id,
            granularity=granularity.value,
            start=_rfc3339(start),
            stop=_rfc3339(stop),
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url, params={"org": self.org}, headers=headers, content=query
                )
                response.raise_for_status()
                records = self._parse_csv(response.text, granularity)

        except httpx.HTTPStatusError as e:
            logger.error(
                "InfluxDB HTTP error",
                status_code=e.response.status_code,
                response_text=e.response.text,
                url=url,
            )
            raise TelemetryExportUnavailableError(
                f"InfluxDB HTTP error {e.response.status_code}: {e.response.text}"
            ) from e

        except httpx.RequestError as e:
            logger.error("InfluxDB request error", error=str(e), url=url)
            raise TelemetryExportUnavailableError(
                f"InfluxDB request failed: {str(e)}"
            ) from e

        logger.info(
            "Telemetry exported from InfluxDB",
            device_id=device_id,
            records=len(records),
        )
        return records

    def _parse_csv(self, body: str, granularity: Granularity) -> List[ConsumptionRecord]:
        """
        Parse the annotated CSV of a Flux query.

        Each result table starts with its own header row; blank lines separate
        tables and ``#`` rows carry annotations.
        """
        key_length = _KEY_LENGTH[granularity]
        volumes: Dict[str, float] = {}
        columns: Optional[List[str]] = None

        for row in csv.reader(io.StringIO(body)):
            if not row or all(not cell.strip() for cell in row):
                columns = None
                continue
            if row[0].startswith("#"):
                continue
            if columns is None or ("_time" in row and "_value" in row):
                columns = [cell.strip() for cell in row]
                continue

            values = dict(zip(columns, row))
            time_value = values.get("_time", "").strip()
            raw_volume = values.get("_value", "").strip()
            if not time_value or not raw_volume:
                continue
            try:
                liters = float(raw_volume)
            except ValueError:
                logger.warning("Skipping non-numeric InfluxDB value", value=raw_volume)
                continue

            key = time_value[:key_length]
            volumes[key] = volumes.get(key, 0.0) + max(liters, 0.0) / LITERS_PER_M3

        return [
            ConsumptionRecord(date=key, volume=round(volume, 3))
            for key, volume in sorted(volumes.items())
        ]
