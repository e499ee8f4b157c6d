"""
Infrastructure Repository - Upload Registry MongoDB Implementation

This module implements the upload registry using the MongoDB ``uploads``
collection. Each document mirrors one ``UploadRecord``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from aquacast.domain.entities.consumption import DateRange, Granularity
from aquacast.domain.entities.errors import UploadNotFoundError
from aquacast.domain.entities.upload import (
    FailureReason,
    ForecastSummary,
    TrainingMetrics,
    TrainingResult,
    UploadRecord,
    UploadStatus,
)
from aquacast.domain.repositories.upload_repository import (
    IUploadRepository,
    UploadMutator,
)
from aquacast.infrastructure.database.mongo_database import (
    UPLOADS_COLLECTION,
    MongoDatabase,
)

logger = structlog.get_logger(__name__)


def _as_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    # MongoDB returns naive datetimes in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UploadRepository(IUploadRepository):
    """MongoDB implementation of the upload registry."""

    def __init__(self, database: MongoDatabase):
        """Initialize repository with database connection."""
        self.database = database
        self.collection_name = UPLOADS_COLLECTION

    async def create(self, record: UploadRecord) -> UploadRecord:
        try:
            collection = self.database.get_collection(self.collection_name)
            result = collection.insert_one(self._to_document(record))
            if not result.acknowledged:
                raise PyMongoError("Insert of upload record was not acknowledged")

            logger.info(
                "Upload record created",
                upload_id=str(record.id),
                file_hash=record.file_hash,
            )
            return record

        except PyMongoError as e:
            logger.error(
                "Failed to create upload record",
                upload_id=str(record.id),
                error=str(e),
            )
            raise e

    async def get_by_id(self, upload_id: UUID) -> Optional[UploadRecord]:
        try:
            collection = self.database.get_collection(self.collection_name)
            document = collection.find_one({"id": str(upload_id)})
            return self._from_document(document) if document else None

        except PyMongoError as e:
            logger.error(
                "Failed to get upload record", upload_id=str(upload_id), error=str(e)
            )
            raise e

    async def get_by_hash(self, file_hash: str) -> Optional[UploadRecord]:
        try:
            collection = self.database.get_collection(self.collection_name)
            document = collection.find_one({"file_hash": file_hash})
            return self._from_document(document) if document else None

        except PyMongoError as e:
            logger.error(
                "Failed to get upload record by hash", file_hash=file_hash, error=str(e)
            )
            raise e

    async def update(self, upload_id: UUID, mutator: UploadMutator) -> UploadRecord:
        try:
            collection = self.database.get_collection(self.collection_name)
            document = collection.find_one({"id": str(upload_id)})
            if document is None:
                raise UploadNotFoundError(str(upload_id))

            record = self._from_document(document)
            mutator(record)

            result = collection.replace_one(
                {"id": str(upload_id)}, self._to_document(record)
            )
            if result.matched_count == 0:
                raise UploadNotFoundError(str(upload_id))

            logger.debug(
                "Upload record updated",
                upload_id=str(upload_id),
                status=record.status.value,
            )
            return record

        except PyMongoError as e:
            logger.error(
                "Failed to update upload record",
                upload_id=str(upload_id),
                error=str(e),
            )
            raise e

    async def list_all(self) -> List[UploadRecord]:
        try:
            collection = self.database.get_collection(self.collection_name)
            cursor = collection.find({}).sort("uploaded_at", DESCENDING)
            return [self._from_document(document) for document in cursor]

        except PyMongoError as e:
            logger.error("Failed to list upload records", error=str(e))
            raise e

    async def delete_all(self) -> int:
        try:
            collection = self.database.get_collection(self.collection_name)
            result = collection.delete_many({})
            return int(result.deleted_count)

        except PyMongoError as e:
            logger.error("Failed to delete upload records", error=str(e))
            raise e

    def _to_document(self, record: UploadRecord) -> Dict[str, Any]:
        """Convert an UploadRecord entity to a MongoDB document."""
        return {
            "id": str(record.id),
            "stored_file_name": record.stored_file_name,
            "original_file_name": record.original_file_name,
            "data_type": record.data_type.value,
            "row_count": record.row_count,
            "date_range": {
                "start": record.date_range.start,
                "end": record.date_range.end,
            },
            "file_hash": record.file_hash,
            "status": record.status.value,
            "training_result": self._result_to_document(record.training_result),
            "uploaded_at": record.uploaded_at,
            "updated_at": record.updated_at,
        }

    def _from_document(self, document: Dict[str, Any]) -> UploadRecord:
        """Convert a MongoDB document to an UploadRecord entity."""
        date_range = document.get("date_range") or {}
        return UploadRecord(
            id=UUID(document["id"]),
            stored_file_name=document["stored_file_name"],
            original_file_name=document.get("original_file_name"),
            data_type=Granularity(document.get("data_type", Granularity.DAILY.value)),
            row_count=int(document.get("row_count", 0)),
            date_range=DateRange(
                start=date_range.get("start", ""), end=date_range.get("end", "")
            ),
            file_hash=document["file_hash"],
            status=UploadStatus(document.get("status", UploadStatus.UPLOADED.value)),
            training_result=self._result_from_document(
                document.get("training_result")
            ),
            uploaded_at=_as_utc(document.get("uploaded_at")),
            updated_at=_as_utc(document.get("updated_at")),
        )

    @staticmethod
    def _result_to_document(
        result: Optional[TrainingResult],
    ) -> Optional[Dict[str, Any]]:
        if result is None:
            return None
        metrics = result.metrics
        return {
            "success": result.success,
            "training_time_seconds": result.training_time_seconds,
            "metrics": (
                {
                    "mae": metrics.mae,
                    "rmse": metrics.rmse,
                    "mape": metrics.mape,
                    "train_size": metrics.train_size,
                    "test_size": metrics.test_size,
                }
                if metrics
                else None
            ),
            "forecast_summary": {
                "daily_count": result.forecast_summary.daily_count,
                "weekly_count": result.forecast_summary.weekly_count,
                "monthly_count": result.forecast_summary.monthly_count,
            },
            "error": result.error,
            "failure_reason": (
                result.failure_reason.value if result.failure_reason else None
            ),
        }

    @staticmethod
    def _result_from_document(
        document: Optional[Dict[str, Any]],
    ) -> Optional[TrainingResult]:
        if not document:
            return None

        metrics_doc = document.get("metrics")
        metrics = None
        if metrics_doc:
            metrics = TrainingMetrics(
                mae=float(metrics_doc.get("mae", 0.0)),
                rmse=float(metrics_doc.get("rmse", 0.0)),
                mape=float(metrics_doc.get("mape", 0.0)),
                train_size=int(metrics_doc.get("train_size", 0)),
                test_size=int(metrics_doc.get("test_size", 0)),
            )

        summary_doc = document.get("forecast_summary") or {}
        reason = document.get("failure_reason")
        return TrainingResult(
            success=bool(document.get("success", False)),
            training_time_seconds=int(document.get("training_time_seconds", 0)),
            metrics=metrics,
            forecast_summary=ForecastSummary(
                daily_count=int(summary_doc.get("daily_count", 0)),
                weekly_count=int(summary_doc.get("weekly_count", 0)),
                monthly_count=int(summary_doc.get("monthly_count", 0)),
            ),
            error=document.get("error"),
            failure_reason=FailureReason(reason) if reason else None,
        )
