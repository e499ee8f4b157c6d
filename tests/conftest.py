from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Optional, Sequence
from uuid import UUID

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aquacast.domain.entities.consumption import (  # noqa: E402
    ConsumptionRecord,
    DateRange,
    Granularity,
)
from aquacast.domain.entities.errors import (  # noqa: E402
    ForecastStoreError,
    UploadNotFoundError,
)
from aquacast.domain.entities.forecast import ForecastArtifact  # noqa: E402
from aquacast.domain.entities.upload import UploadRecord  # noqa: E402
from aquacast.domain.repositories.forecast_repository import (  # noqa: E402
    IForecastRepository,
)
from aquacast.domain.repositories.upload_file_repository import (  # noqa: E402
    IUploadFileRepository,
)
from aquacast.domain.repositories.upload_repository import (  # noqa: E402
    IUploadRepository,
    UploadMutator,
)

DAILY_CSV = b"date,total_m3\n2025-01-01,1.5\n2025-01-02,2.0\n"


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self._documents)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.dropped_indexes: List[str] = []
        self.created_indexes: List[tuple[Any, ...]] = []

    def find_one(self, query: Dict[str, Any]) -> Dict[str, Any] | None:
        for document in self.documents:
            if self._matches(document, query):
                return dict(document)
        return None

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        return FakeCursor(
            [dict(doc) for doc in self.documents if self._matches(doc, query)]
        )

    def insert_one(self, document: Dict[str, Any]) -> Any:
        self.documents.append(dict(document))
        return SimpleNamespace(acknowledged=True, inserted_id=document.get("id"))

    def replace_one(
        self, query: Dict[str, Any], document: Dict[str, Any], upsert: bool = False
    ) -> Any:
        for index, existing in enumerate(self.documents):
            if self._matches(existing, query):
                self.documents[index] = dict(document)
                return SimpleNamespace(matched_count=1, acknowledged=True)
        if upsert:
            self.documents.append(dict(document))
        return SimpleNamespace(matched_count=0, acknowledged=True)

    def delete_one(self, query: Dict[str, Any]) -> Any:
        for index, existing in enumerate(self.documents):
            if self._matches(existing, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1, acknowledged=True)
        return SimpleNamespace(deleted_count=0, acknowledged=True)

    def delete_many(self, query: Dict[str, Any]) -> Any:
        kept = [doc for doc in self.documents if not self._matches(doc, query)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return SimpleNamespace(deleted_count=deleted, acknowledged=True)

    def drop_index(self, index_name: str) -> None:
        self.dropped_indexes.append(index_name)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in query.items())


class FakeMongoDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.closed = False

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def create_indexes(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


class InMemoryUploadRepository(IUploadRepository):
    def __init__(self) -> None:
        self.records: Dict[UUID, UploadRecord] = {}

    async def create(self, record: UploadRecord) -> UploadRecord:
        self.records[record.id] = record
        return record

    async def get_by_id(self, upload_id: UUID) -> Optional[UploadRecord]:
        return self.records.get(upload_id)

    async def get_by_hash(self, file_hash: str) -> Optional[UploadRecord]:
        for record in self.records.values():
            if record.file_hash == file_hash:
                return record
        return None

    async def update(self, upload_id: UUID, mutator: UploadMutator) -> UploadRecord:
        record = self.records.get(upload_id)
        if record is None:
            raise UploadNotFoundError(str(upload_id))
        mutator(record)
        return record

    async def list_all(self) -> List[UploadRecord]:
        return sorted(
            self.records.values(), key=lambda r: r.uploaded_at, reverse=True
        )

    async def delete_all(self) -> int:
        count = len(self.records)
        self.records.clear()
        return count


class InMemoryUploadFileRepository(IUploadFileRepository):
    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}

    async def save(
        self,
        stored_file_name: str,
        content: bytes,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        self.files[stored_file_name] = content
        return stored_file_name

    async def load(self, stored_file_name: str) -> Optional[bytes]:
        return self.files.get(stored_file_name)

    async def delete(self, stored_file_name: str) -> bool:
        return self.files.pop(stored_file_name, None) is not None

    async def delete_all(self) -> int:
        count = len(self.files)
        self.files.clear()
        return count


class InMemoryForecastRepository(IForecastRepository):
    def __init__(self, fail_on_save: bool = False) -> None:
        self.artifact: Optional[ForecastArtifact] = None
        self.fail_on_save = fail_on_save

    async def save(self, artifact: ForecastArtifact) -> None:
        if self.fail_on_save:
            raise ForecastStoreError("Failed to save forecast: disk full")
        self.artifact = artifact

    async def read(self) -> Optional[ForecastArtifact]:
        return self.artifact

    async def clear(self) -> bool:
        had_forecast = self.artifact is not None
        self.artifact = None
        return had_forecast


class StubTelemetryGateway:
    def __init__(
        self,
        records: Optional[List[ConsumptionRecord]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.records = records or []
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def export_range(self, device_id, start, granularity, end=None):
        self.calls.append(
            {"device_id": device_id, "start": start, "granularity": granularity, "end": end}
        )
        if self.error is not None:
            raise self.error
        return list(self.records)


class StubTrainingGateway:
    def __init__(
        self, payload: Any = None, error: Optional[Exception] = None, delay: float = 0.0
    ) -> None:
        self.payload = payload
        self.error = error
        self.delay = delay
        self.submitted: List[bytes] = []
        self.cancelled = False

    async def train(self, workbook: bytes, file_name: str) -> Dict[str, Any]:
        self.submitted.append(workbook)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.payload


def make_training_payload(mape: float = 8.5) -> Dict[str, Any]:
    return {
        "success": True,
        "daily": [
            {
                "date": "2025-01-03",
                "volumeInLiters": 1800.0,
                "volumeInLiters_lower": 1500.0,
                "volumeInLiters_upper": 2100.0,
            },
            {"date": "2025-01-04", "volumeInLiters": 1900.0},
        ],
        "weekly": [
            {
                "week": "2025-01-06/2025-01-12",
                "volumeInLiters": 12600.0,
                "volumeInLiters_lower": 11000.0,
                "volumeInLiters_upper": 14000.0,
            }
        ],
        "monthly": [
            {
                "month": "2025-02",
                "volumeInLiters": 54000.0,
                "volumeInLiters_lower": 50000.0,
                "volumeInLiters_upper": 58000.0,
            }
        ],
        "metrics": {
            "mae": 0.12,
            "rmse": 0.2,
            "mape": mape,
            "train_size": 40,
            "test_size": 10,
        },
        "metadata": {
            "model": "prophet",
            "trained_on": "2025-01-02",
            "prediction_date": "2025-01-03",
            "unit": "liters",
            "holdout_days": 10,
        },
    }


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def daily_csv() -> bytes:
    return DAILY_CSV


@pytest.fixture()
def training_payload() -> Dict[str, Any]:
    return make_training_payload()


@pytest.fixture()
def sample_upload_record() -> UploadRecord:
    return UploadRecord(
        stored_file_name="upload_1735689600000.csv",
        original_file_name="history.csv",
        data_type=Granularity.DAILY,
        row_count=2,
        date_range=DateRange(start="2025-01-01", end="2025-01-02"),
        file_hash="a" * 64,
        uploaded_at=datetime(2025, 1, 3, tzinfo=timezone.utc),
        updated_at=datetime(2025, 1, 3, tzinfo=timezone.utc),
    )
