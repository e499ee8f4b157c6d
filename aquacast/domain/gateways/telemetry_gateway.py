"""
Domain Gateway Interface - Telemetry Export

Exports aggregated consumption from the live time-series storage so it can
be consolidated with uploaded history before training.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from aquacast.domain.entities.consumption import ConsumptionRecord, Granularity


class ITelemetryGateway(ABC):
    """Interface for the time-series storage export."""

    @abstractmethod
    async def export_range(
        self,
        device_id: str,
        start: datetime,
        granularity: Granularity,
        end: Optional[datetime] = None,
    ) -> List[ConsumptionRecord]:
        """
        Export per-period consumption (m³) between ``start`` and ``end``.

        Raises:
            TelemetryExportUnavailableError: If the storage cannot be queried.
        """
        pass
