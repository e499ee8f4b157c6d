from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import pytest

from aquacast.application.use_cases.retrain_use_case import RetrainUseCase
from aquacast.application.use_cases.upload_management_use_case import (
    UploadManagementUseCase,
)
from aquacast.domain.entities.upload import UploadRecord
from aquacast.infrastructure.codecs.workbook_codec import WorkbookCodec
from aquacast.infrastructure.services.retrain_tracker import InMemoryRetrainTracker
from tests.conftest import (
    DAILY_CSV,
    InMemoryForecastRepository,
    InMemoryUploadFileRepository,
    InMemoryUploadRepository,
    StubTelemetryGateway,
    StubTrainingGateway,
    make_training_payload,
)


@dataclass
class RetrainHarness:
    uploads: InMemoryUploadRepository = field(default_factory=InMemoryUploadRepository)
    files: InMemoryUploadFileRepository = field(
        default_factory=InMemoryUploadFileRepository
    )
    forecasts: InMemoryForecastRepository = field(
        default_factory=InMemoryForecastRepository
    )
    telemetry: StubTelemetryGateway = field(default_factory=StubTelemetryGateway)
    training: StubTrainingGateway = field(
        default_factory=lambda: StubTrainingGateway(payload=make_training_payload())
    )
    codec: WorkbookCodec = field(default_factory=WorkbookCodec)
    tracker: InMemoryRetrainTracker = field(default_factory=InMemoryRetrainTracker)

    def retrain_use_case(self, timeout_seconds: float = 5.0) -> RetrainUseCase:
        return RetrainUseCase(
            upload_repository=self.uploads,
            upload_file_repository=self.files,
            forecast_repository=self.forecasts,
            telemetry_gateway=self.telemetry,
            training_gateway=self.training,
            dataset_codec=self.codec,
            retrain_tracker=self.tracker,
            timeout_seconds=timeout_seconds,
        )

    def upload_use_case(self, **kwargs: Any) -> UploadManagementUseCase:
        return UploadManagementUseCase(
            upload_repository=self.uploads,
            upload_file_repository=self.files,
            forecast_repository=self.forecasts,
            dataset_codec=self.codec,
            retrain_use_case=self.retrain_use_case(),
            **kwargs,
        )

    async def seed(
        self, record: UploadRecord, content: Optional[bytes] = DAILY_CSV
    ) -> UploadRecord:
        await self.uploads.create(record)
        if content is not None:
            await self.files.save(record.stored_file_name, content)
        return record


@pytest.fixture()
def harness() -> RetrainHarness:
    return RetrainHarness()
