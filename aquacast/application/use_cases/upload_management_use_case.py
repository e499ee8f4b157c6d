"""
Application Use Cases - Upload Management

Accepts historical consumption files into the upload registry and manages
the registry afterwards.
"""

import asyncio
import os
import time
from typing import List, Optional, Sequence, Tuple, Union
from uuid import UUID

import structlog

from aquacast.application.dtos.upload_dto import (
    ClearUploadsResponseDTO,
    DuplicateUploadDTO,
    UploadRecordDTO,
    UploadResponseDTO,
)
from aquacast.application.use_cases.retrain_use_case import RetrainUseCase
from aquacast.domain.entities.consumption import DateRange, Granularity
from aquacast.domain.entities.errors import (
    DatasetValidationError,
    DomainError,
    UnsupportedUploadError,
    UploadNotFoundError,
)
from aquacast.domain.entities.upload import UploadRecord
from aquacast.domain.ports.dataset_codec import IDatasetCodec
from aquacast.domain.repositories.forecast_repository import IForecastRepository
from aquacast.domain.repositories.upload_file_repository import IUploadFileRepository
from aquacast.domain.repositories.upload_repository import IUploadRepository
from aquacast.domain.services.dataset_normalizer import (
    DEFAULT_DATE_COLUMNS,
    DEFAULT_VOLUME_COLUMNS,
    normalize_dataset,
)
from aquacast.domain.services.fingerprint import compute_fingerprint

logger = structlog.get_logger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class UploadManagementUseCase:
    """Use case for ingesting and managing uploaded history files."""

    def __init__(
        self,
        upload_repository: IUploadRepository,
        upload_file_repository: IUploadFileRepository,
        forecast_repository: IForecastRepository,
        dataset_codec: IDatasetCodec,
        retrain_use_case: RetrainUseCase,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        auto_retrain: bool = True,
        date_columns: Sequence[str] = DEFAULT_DATE_COLUMNS,
        volume_columns: Sequence[str] = DEFAULT_VOLUME_COLUMNS,
    ):
        self.upload_repository = upload_repository
        self.upload_file_repository = upload_file_repository
        self.forecast_repository = forecast_repository
        self.dataset_codec = dataset_codec
        self.retrain_use_case = retrain_use_case
        self.max_upload_bytes = max_upload_bytes
        self.auto_retrain = auto_retrain
        self.date_columns = tuple(date_columns)
        self.volume_columns = tuple(volume_columns)
        # Serializes the fingerprint check with the registry insert
        self._ingest_lock = asyncio.Lock()
        self._last_stamp = 0

    async def upload(
        self,
        content: bytes,
        file_name: Optional[str],
        auto_retrain: Optional[bool] = None,
    ) -> Union[UploadResponseDTO, DuplicateUploadDTO]:
        """
        Validate and register an uploaded file, then optionally retrain.

        A file whose bytes were already uploaded is not registered again; the
        existing registry entry is returned as a ``DuplicateUploadDTO``.

        Raises:
            UnsupportedUploadError: Wrong extension, empty or oversized file
            DatasetValidationError: The table has no usable rows or columns
        """
        self._check_file(content, file_name)
        file_hash = compute_fingerprint(content)

        async with self._ingest_lock:
            existing = await self.upload_repository.get_by_hash(file_hash)
            if existing is not None:
                logger.info(
                    "Duplicate upload detected",
                    file_name=file_name,
                    existing_upload_id=str(existing.id),
                )
                return DuplicateUploadDTO(
                    existing_upload=UploadRecordDTO.from_entity(existing)
                )

            header, rows = self.dataset_codec.read_table(content, file_name)
            result = normalize_dataset(
                header, rows, self.date_columns, self.volume_columns
            )
            if not result.valid:
                logger.info(
                    "Upload rejected by validation",
                    file_name=file_name,
                    errors=result.errors,
                )
                raise DatasetValidationError(result.errors, result.warnings)

            stored_file_name = self._stored_file_name(file_name)
            await self.upload_file_repository.save(
                stored_file_name,
                content,
                metadata={"original_file_name": file_name, "file_hash": file_hash},
            )

            record = UploadRecord(
                stored_file_name=stored_file_name,
                original_file_name=file_name,
                data_type=result.data_type,
                row_count=result.row_count,
                date_range=DateRange(
                    start=result.records[0].date, end=result.records[-1].date
                ),
                file_hash=file_hash,
            )
            try:
                record = await self.upload_repository.create(record)
            except Exception:
                await self._discard_file(stored_file_name)
                raise

        logger.info(
            "Upload registered",
            upload_id=str(record.id),
            stored_file_name=stored_file_name,
            data_type=record.data_type.value,
            row_count=record.row_count,
            warnings=len(result.warnings),
        )

        response = UploadResponseDTO(
            upload=UploadRecordDTO.from_entity(record),
            warnings=result.warnings,
        )

        should_retrain = self.auto_retrain if auto_retrain is None else auto_retrain
        if should_retrain:
            response.training_triggered = True
            try:
                retrain = await self.retrain_use_case.execute(record.id)
                response.training_result = retrain.training_result
            except DomainError as e:
                logger.warning(
                    "Automatic retrain failed",
                    upload_id=str(record.id),
                    error=e.message,
                )
                response.training_error = e.message
            except Exception as e:
                logger.exception(
                    "Automatic retrain crashed",
                    upload_id=str(record.id),
                    error=str(e),
                )
                response.training_error = "Internal server error during training"

            refreshed = await self.upload_repository.get_by_id(record.id)
            if refreshed is not None:
                response.upload = UploadRecordDTO.from_entity(refreshed)

        return response

    async def list_uploads(self) -> List[UploadRecordDTO]:
        records = await self.upload_repository.list_all()
        return [UploadRecordDTO.from_entity(record) for record in records]

    async def get_upload(self, upload_id: UUID) -> UploadRecordDTO:
        """
        Get one upload registry entry.

        Raises:
            UploadNotFoundError: If the upload does not exist
        """
        record = await self.upload_repository.get_by_id(upload_id)
        if record is None:
            raise UploadNotFoundError(str(upload_id))
        return UploadRecordDTO.from_entity(record)

    async def clear_all(self) -> ClearUploadsResponseDTO:
        """Delete every upload, its stored bytes and the current forecast."""
        deleted_uploads = await self.upload_repository.delete_all()
        deleted_files = await self.upload_file_repository.delete_all()
        forecast_cleared = await self.forecast_repository.clear()
        logger.warning(
            "Upload registry cleared",
            deleted_uploads=deleted_uploads,
            deleted_files=deleted_files,
            forecast_cleared=forecast_cleared,
        )
        return ClearUploadsResponseDTO(
            deleted_uploads=deleted_uploads,
            deleted_files=deleted_files,
            forecast_cleared=forecast_cleared,
        )

    def get_template(self, granularity: Granularity) -> Tuple[bytes, str]:
        """Return the workbook template and its download file name."""
        content = self.dataset_codec.write_template(granularity)
        return content, f"template_{granularity.value}.xlsx"

    def _check_file(self, content: bytes, file_name: Optional[str]) -> None:
        if not file_name or not self.dataset_codec.supports(file_name):
            raise UnsupportedUploadError(
                "Invalid file type. Only .xlsx and .csv files are allowed",
                details={"file_name": file_name},
            )
        if not content:
            raise UnsupportedUploadError("Uploaded file is empty")
        self.check_size(len(content))

    def check_size(self, size_bytes: Optional[int]) -> None:
        """
        Reject a file larger than ``max_upload_bytes``; unknown sizes pass.

        Raises:
            UnsupportedUploadError: With ``too_large`` set
        """
        if size_bytes is not None and size_bytes > self.max_upload_bytes:
            raise UnsupportedUploadError(
                f"File size exceeds {self.max_upload_bytes // (1024 * 1024)}MB limit",
                too_large=True,
                details={"size_bytes": size_bytes, "limit": self.max_upload_bytes},
            )

    async def _discard_file(self, stored_file_name: str) -> None:
        try:
            await self.upload_file_repository.delete(stored_file_name)
        except DomainError as e:
            logger.error(
                "Failed to discard unregistered upload file",
                stored_file_name=stored_file_name,
                error=e.message,
            )

    def _stored_file_name(self, file_name: str) -> str:
        extension = os.path.splitext(file_name)[1].lower().lstrip(".")
        # Epoch milliseconds, bumped so two uploads never share a name
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return f"upload_{stamp}.{extension}"
