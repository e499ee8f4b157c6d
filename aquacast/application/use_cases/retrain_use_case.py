"""
Application Use Cases - Retrain

Orchestrates one retrain of the forecast model from an accepted upload:
re-read the stored file, merge recent telemetry, submit the dataset to the
training service and publish the resulting forecast.
"""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import List, Sequence, Tuple
from uuid import UUID

import structlog
from pydantic import ValidationError

from aquacast.application.dtos.training_dto import (
    RetrainProgressDTO,
    RetrainResponseDTO,
    TrainingServiceResponseDTO,
)
from aquacast.application.dtos.upload_dto import TrainingResultDTO
from aquacast.domain.entities.consumption import ConsumptionRecord, Granularity
from aquacast.domain.entities.errors import (
    DatasetIntegrityError,
    DomainError,
    ForecastStoreError,
    InvalidTrainingResponseError,
    MissingArtifactError,
    RemoteTimeoutError,
    RemoteTrainingFailedError,
    TrainingServiceUnavailableError,
    UploadNotFoundError,
)
from aquacast.domain.entities.forecast import (
    ForecastArtifact,
    ForecastMetadata,
    ForecastPoint,
)
from aquacast.domain.entities.retrain_progress import (
    LogLevel,
    RetrainPhase,
    RetrainProgress,
)
from aquacast.domain.entities.upload import (
    FailureReason,
    ForecastSummary,
    TrainingMetrics,
    TrainingResult,
    UploadRecord,
)
from aquacast.domain.gateways.telemetry_gateway import ITelemetryGateway
from aquacast.domain.gateways.training_service_gateway import ITrainingServiceGateway
from aquacast.domain.ports.dataset_codec import IDatasetCodec
from aquacast.domain.ports.retrain_tracker import IRetrainTracker
from aquacast.domain.repositories.forecast_repository import IForecastRepository
from aquacast.domain.repositories.upload_file_repository import IUploadFileRepository
from aquacast.domain.repositories.upload_repository import IUploadRepository
from aquacast.domain.services.consolidator import consolidate
from aquacast.domain.services.dataset_normalizer import (
    DEFAULT_DATE_COLUMNS,
    DEFAULT_VOLUME_COLUMNS,
    normalize_dataset,
)

logger = structlog.get_logger(__name__)

TRAINING_FILE_NAME = "training_data.xlsx"


class RetrainUseCase:
    """Use case running the retrain pipeline for one upload."""

    def __init__(
        self,
        upload_repository: IUploadRepository,
        upload_file_repository: IUploadFileRepository,
        forecast_repository: IForecastRepository,
        telemetry_gateway: ITelemetryGateway,
        training_gateway: ITrainingServiceGateway,
        dataset_codec: IDatasetCodec,
        retrain_tracker: IRetrainTracker,
        device_id: str = "water_meter_01",
        telemetry_window_days: int = 30,
        timeout_seconds: float = 300.0,
        date_columns: Sequence[str] = DEFAULT_DATE_COLUMNS,
        volume_columns: Sequence[str] = DEFAULT_VOLUME_COLUMNS,
    ):
        """
        Initialize the retrain use case.

        Args:
            upload_repository: Upload registry
            upload_file_repository: Storage of raw upload bytes
            forecast_repository: Store of the current forecast artifact
            telemetry_gateway: Export of recent live telemetry
            training_gateway: Client of the external training service
            dataset_codec: Reader/writer of tabular files
            retrain_tracker: Single-flight guard and progress registry
            device_id: Meter whose telemetry is merged into the dataset
            telemetry_window_days: Trailing telemetry window
            timeout_seconds: Budget of one training request
        """
        self.upload_repository = upload_repository
        self.upload_file_repository = upload_file_repository
        self.forecast_repository = forecast_repository
        self.telemetry_gateway = telemetry_gateway
        self.training_gateway = training_gateway
        self.dataset_codec = dataset_codec
        self.retrain_tracker = retrain_tracker
        self.device_id = device_id
        self.telemetry_window_days = telemetry_window_days
        self.timeout_seconds = timeout_seconds
        self.date_columns = tuple(date_columns)
        self.volume_columns = tuple(volume_columns)

    async def execute(
        self, upload_id: UUID, use_telemetry: bool = True
    ) -> RetrainResponseDTO:
        """
        Retrain the forecast model from an upload.

        Raises:
            RetrainInProgressError: If the upload is already being retrained
            UploadNotFoundError: If the upload does not exist
            MissingArtifactError: If the stored file is gone
            DatasetIntegrityError: If the stored file no longer normalizes
            RemoteTimeoutError: If training exceeds the time budget
            TrainingServiceUnavailableError: If the service is unreachable
            RemoteTrainingFailedError: If the service rejects the dataset
        """
        progress = await self.retrain_tracker.claim(upload_id)
        started = time.monotonic()
        logger.info(
            "Retrain started", upload_id=str(upload_id), use_telemetry=use_telemetry
        )

        try:
            return await self._run(upload_id, use_telemetry, progress, started)
        except DomainError as e:
            progress.fail(e.message)
            raise
        except Exception as e:
            logger.exception("Unexpected retrain error", upload_id=str(upload_id))
            progress.fail("Unexpected error during training")
            await self._record_unexpected_failure(upload_id, str(e), started)
            raise
        finally:
            await self.retrain_tracker.release(upload_id)

    async def get_progress(self, upload_id: UUID) -> RetrainProgressDTO:
        """
        Return the progress of the latest retrain of an upload.

        Raises:
            UploadNotFoundError: If the upload does not exist
        """
        if await self.upload_repository.get_by_id(upload_id) is None:
            raise UploadNotFoundError(str(upload_id))

        progress = await self.retrain_tracker.get(upload_id)
        if progress is None:
            progress = RetrainProgress(upload_id=upload_id)
        running = await self.retrain_tracker.is_running(upload_id)
        return RetrainProgressDTO.from_entity(progress, running=running)

    async def _run(
        self,
        upload_id: UUID,
        use_telemetry: bool,
        progress: RetrainProgress,
        started: float,
    ) -> RetrainResponseDTO:
        record = await self.upload_repository.get_by_id(upload_id)
        if record is None:
            raise UploadNotFoundError(str(upload_id))

        record = await self.upload_repository.update(
            upload_id, lambda r: r.mark_training()
        )

        self._advance(progress, RetrainPhase.UPLOADING, "Loading uploaded file")
        content = await self.upload_file_repository.load(record.stored_file_name)
        if content is None:
            await self._fail(
                upload_id,
                FailureReason.MISSING_ARTIFACT,
                "Upload file not found",
                started,
            )
            raise MissingArtifactError(record.stored_file_name)

        self._advance(progress, RetrainPhase.VALIDATING, "Validating uploaded data")
        upload_records, data_type = await self._renormalize(
            record, content, started
        )
        progress.record(f"Loaded {len(upload_records)} rows from historical data")

        telemetry_records: List[ConsumptionRecord] = []
        if use_telemetry:
            telemetry_records = await self._export_telemetry(data_type, progress)

        dataset = consolidate(upload_records, telemetry_records)
        progress.record(f"Combined data: {len(dataset)} unique rows")
        logger.info(
            "Dataset consolidated",
            upload_id=str(upload_id),
            upload_records=len(upload_records),
            telemetry_records=len(telemetry_records),
            total_records=len(dataset),
        )

        self._advance(progress, RetrainPhase.TRAINING, "Training forecast model")
        response = await self._train(upload_id, dataset, started)

        self._advance(progress, RetrainPhase.SAVING, "Saving forecast")
        forecast_saved = await self._save_forecast(upload_id, response, progress)

        metrics = response.metrics
        result = TrainingResult(
            success=True,
            training_time_seconds=self._elapsed(started),
            metrics=TrainingMetrics(
                mae=metrics.mae,
                rmse=metrics.rmse,
                mape=metrics.mape,
                train_size=metrics.train_size,
                test_size=metrics.test_size,
            ),
            forecast_summary=ForecastSummary(
                daily_count=len(response.daily),
                weekly_count=len(response.weekly),
                monthly_count=len(response.monthly),
            ),
        )
        record = await self.upload_repository.update(
            upload_id, lambda r: r.mark_trained(result)
        )

        self._advance(
            progress,
            RetrainPhase.COMPLETED,
            f"Training completed! MAPE: {metrics.mape:.2f}%",
        )
        logger.info(
            "Retrain completed",
            upload_id=str(upload_id),
            mape=metrics.mape,
            training_time_seconds=result.training_time_seconds,
            forecast_saved=forecast_saved,
        )

        return RetrainResponseDTO(
            upload_id=record.id,
            status=record.status,
            message=(
                "Training completed successfully"
                if forecast_saved
                else "Training completed but the forecast could not be saved"
            ),
            training_result=TrainingResultDTO.from_entity(result),
            forecast_saved=forecast_saved,
            upload_records=len(upload_records),
            telemetry_records=len(telemetry_records),
            total_records=len(dataset),
        )

    async def _renormalize(
        self, record: UploadRecord, content: bytes, started: float
    ) -> Tuple[List[ConsumptionRecord], Granularity]:
        errors: List[str]
        try:
            header, rows = self.dataset_codec.read_table(
                content, record.stored_file_name
            )
            result = normalize_dataset(
                header, rows, self.date_columns, self.volume_columns
            )
            errors = result.errors
        except DomainError as e:
            result = None
            errors = [e.message]

        if result is None or not result.valid:
            logger.error(
                "Stored upload failed re-validation",
                upload_id=str(record.id),
                stored_file_name=record.stored_file_name,
                errors=errors,
            )
            await self._fail(
                record.id,
                FailureReason.INTERNAL_ERROR,
                "Stored upload could not be processed",
                started,
            )
            raise DatasetIntegrityError(
                "Stored upload could not be processed", {"errors": errors}
            )

        return result.records, result.data_type

    async def _export_telemetry(
        self, granularity: Granularity, progress: RetrainProgress
    ) -> List[ConsumptionRecord]:
        progress.record(
            f"Exporting {self.telemetry_window_days} days of telemetry"
        )
        start = datetime.now(timezone.utc) - timedelta(days=self.telemetry_window_days)
        try:
            records = await self.telemetry_gateway.export_range(
                device_id=self.device_id, start=start, granularity=granularity
            )
        except Exception as e:
            logger.warning(
                "Telemetry export failed, continuing without telemetry",
                device_id=self.device_id,
                error=str(e),
            )
            progress.record(
                "Telemetry export failed, continuing with uploaded data only",
                LogLevel.WARNING,
            )
            return []

        progress.record(f"Exported {len(records)} rows from telemetry")
        return records

    async def _train(
        self,
        upload_id: UUID,
        dataset: Sequence[ConsumptionRecord],
        started: float,
    ) -> TrainingServiceResponseDTO:
        workbook = self.dataset_codec.write_workbook(dataset)
        try:
            payload = await asyncio.wait_for(
                self.training_gateway.train(workbook, TRAINING_FILE_NAME),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, RemoteTimeoutError) as e:
            error = RemoteTimeoutError(self.timeout_seconds)
            await self._fail(upload_id, FailureReason.TIMEOUT, error.message, started)
            raise error from e
        except TrainingServiceUnavailableError as e:
            await self._fail(
                upload_id, FailureReason.SERVICE_UNAVAILABLE, e.message, started
            )
            raise
        except RemoteTrainingFailedError as e:
            await self._fail(upload_id, FailureReason.REMOTE_ERROR, e.message, started)
            raise

        try:
            return TrainingServiceResponseDTO.model_validate(payload)
        except ValidationError as e:
            problems = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            error = InvalidTrainingResponseError(
                "invalid response from training service", details={"errors": problems}
            )
            await self._fail(upload_id, FailureReason.REMOTE_ERROR, error.message, started)
            raise error from e

    async def _save_forecast(
        self,
        upload_id: UUID,
        response: TrainingServiceResponseDTO,
        progress: RetrainProgress,
    ) -> bool:
        def to_points(points) -> List[ForecastPoint]:
            return [
                ForecastPoint(
                    period=p.period,
                    value=p.value,
                    lower=p.value if p.lower is None else p.lower,
                    upper=p.value if p.upper is None else p.upper,
                )
                for p in points
            ]

        metadata = response.metadata
        artifact = ForecastArtifact(
            daily=to_points(response.daily),
            weekly=to_points(response.weekly),
            monthly=to_points(response.monthly),
            metadata=ForecastMetadata(
                model=metadata.model,
                trained_on=metadata.trained_on,
                prediction_date=metadata.prediction_date,
                unit=metadata.unit,
                note=metadata.note,
                evaluation=response.evaluation(),
            ),
        )
        try:
            await self.forecast_repository.save(artifact)
        except ForecastStoreError as e:
            logger.error(
                "Failed to save forecast", upload_id=str(upload_id), error=e.message
            )
            progress.record("Failed to save forecast output", LogLevel.WARNING)
            return False

        progress.record("Saved forecast output")
        return True

    async def _fail(
        self,
        upload_id: UUID,
        reason: FailureReason,
        message: str,
        started: float,
    ) -> None:
        elapsed = self._elapsed(started)
        await self.upload_repository.update(
            upload_id, lambda r: r.mark_failed(reason, message, elapsed)
        )
        logger.error(
            "Retrain failed",
            upload_id=str(upload_id),
            reason=reason.value,
            error=message,
        )

    async def _record_unexpected_failure(
        self, upload_id: UUID, message: str, started: float
    ) -> None:
        try:
            await self._fail(upload_id, FailureReason.INTERNAL_ERROR, message, started)
        except DomainError as e:
            logger.error(
                "Could not record retrain failure",
                upload_id=str(upload_id),
                error=e.message,
            )

    @staticmethod
    def _advance(progress: RetrainProgress, phase: RetrainPhase, step: str) -> None:
        progress.advance(phase, step)
        logger.info(
            "Retrain phase changed",
            upload_id=str(progress.upload_id),
            phase=phase.value,
            progress=progress.progress,
            step=step,
        )

    @staticmethod
    def _elapsed(started: float) -> int:
        return int(round(time.monotonic() - started))
