"""
Infrastructure Repository - Forecast Store MongoDB Implementation

The current forecast lives in a single document of the ``forecasts``
collection and is replaced atomically on every write.
"""

from typing import Any, Dict, List, Optional

import structlog
from pymongo.errors import PyMongoError

from aquacast.domain.entities.errors import ForecastStoreError
from aquacast.domain.entities.forecast import (
    ForecastArtifact,
    ForecastMetadata,
    ForecastPoint,
)
from aquacast.domain.repositories.forecast_repository import IForecastRepository
from aquacast.infrastructure.database.mongo_database import (
    FORECASTS_COLLECTION,
    MongoDatabase,
)

logger = structlog.get_logger(__name__)

CURRENT_FORECAST_ID = "current"


class ForecastRepository(IForecastRepository):
    """MongoDB implementation of the forecast store."""

    def __init__(self, database: MongoDatabase):
        self.database = database
        self.collection_name = FORECASTS_COLLECTION

    async def save(self, artifact: ForecastArtifact) -> None:
        try:
            collection = self.database.get_collection(self.collection_name)
            collection.replace_one(
                {"_id": CURRENT_FORECAST_ID},
                self._to_document(artifact),
                upsert=True,
            )
            logger.info(
                "Forecast saved",
                daily=len(artifact.daily),
                weekly=len(artifact.weekly),
                monthly=len(artifact.monthly),
            )
        except PyMongoError as e:
            logger.error("Failed to save forecast", error=str(e))
            raise ForecastStoreError(f"Failed to save forecast: {e}") from e

    async def read(self) -> Optional[ForecastArtifact]:
        try:
            collection = self.database.get_collection(self.collection_name)
            document = collection.find_one({"_id": CURRENT_FORECAST_ID})
        except PyMongoError as e:
            logger.error("Failed to read forecast", error=str(e))
            raise ForecastStoreError(f"Failed to read forecast: {e}") from e

        return self._from_document(document) if document else None

    async def clear(self) -> bool:
        try:
            collection = self.database.get_collection(self.collection_name)
            result = collection.delete_one({"_id": CURRENT_FORECAST_ID})
            return result.deleted_count > 0
        except PyMongoError as e:
            logger.error("Failed to clear forecast", error=str(e))
            raise ForecastStoreError(f"Failed to clear forecast: {e}") from e

    @staticmethod
    def _points_to_documents(points: List[ForecastPoint]) -> List[Dict[str, Any]]:
        return [
            {"period": p.period, "value": p.value, "lower": p.lower, "upper": p.upper}
            for p in points
        ]

    @staticmethod
    def _points_from_documents(documents: List[Dict[str, Any]]) -> List[ForecastPoint]:
        return [
            ForecastPoint(
                period=str(doc["period"]),
                value=float(doc["value"]),
                lower=float(doc["lower"]),
                upper=float(doc["upper"]),
            )
            for doc in documents
        ]

    def _to_document(self, artifact: ForecastArtifact) -> Dict[str, Any]:
        metadata = artifact.metadata
        return {
            "_id": CURRENT_FORECAST_ID,
            "daily": self._points_to_documents(artifact.daily),
            "weekly": self._points_to_documents(artifact.weekly),
            "monthly": self._points_to_documents(artifact.monthly),
            "metadata": {
                "model": metadata.model,
                "trained_on": metadata.trained_on,
                "prediction_date": metadata.prediction_date,
                "unit": metadata.unit,
                "note": metadata.note,
                "evaluation": metadata.evaluation,
            },
        }

    def _from_document(self, document: Dict[str, Any]) -> ForecastArtifact:
        metadata = document.get("metadata") or {}
        return ForecastArtifact(
            daily=self._points_from_documents(document.get("daily", [])),
            weekly=self._points_from_documents(document.get("weekly", [])),
            monthly=self._points_from_documents(document.get("monthly", [])),
            metadata=ForecastMetadata(
                model=metadata.get("model", "unknown"),
                trained_on=metadata.get("trained_on", ""),
                prediction_date=metadata.get("prediction_date", ""),
                unit=metadata.get("unit", "liters"),
                note=metadata.get("note"),
                evaluation=metadata.get("evaluation") or {},
            ),
        )
