"""Domain repository interface for the current forecast artifact."""

from abc import ABC, abstractmethod
from typing import Optional

from aquacast.domain.entities.forecast import ForecastArtifact


class IForecastRepository(ABC):
    """Holds exactly one forecast artifact, replaced as a whole on write."""

    @abstractmethod
    async def save(self, artifact: ForecastArtifact) -> None:
        """Replace the current artifact."""
        pass

    @abstractmethod
    async def read(self) -> Optional[ForecastArtifact]:
        """Return the current artifact, or ``None`` if none was written."""
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """Remove the current artifact; ``True`` if one existed."""
        pass
