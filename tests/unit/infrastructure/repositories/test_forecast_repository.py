from __future__ import annotations

import pytest
from pymongo.errors import PyMongoError

from aquacast.domain.entities.errors import ForecastStoreError
from aquacast.domain.entities.forecast import (
    ForecastArtifact,
    ForecastMetadata,
    ForecastPoint,
)
from aquacast.infrastructure.repositories.forecast_repository import (
    ForecastRepository,
)


def _artifact(value: float) -> ForecastArtifact:
    return ForecastArtifact(
        daily=[ForecastPoint("2025-01-03", value, value - 100, value + 100)],
        weekly=[ForecastPoint("2025-01-06/2025-01-12", value * 7, 0, value * 8)],
        monthly=[ForecastPoint("2025-02", value * 30, 0, value * 31)],
        metadata=ForecastMetadata(
            model="prophet",
            trained_on="2025-01-02",
            prediction_date="2025-01-03",
            evaluation={"holdout_days": 10},
        ),
    )


@pytest.mark.asyncio
async def test_save_replaces_single_document(fake_mongo_database) -> None:
    repository = ForecastRepository(fake_mongo_database)

    await repository.save(_artifact(1800.0))
    await repository.save(_artifact(1900.0))

    documents = fake_mongo_database.get_collection("forecasts").documents
    assert len(documents) == 1
    assert documents[0]["_id"] == "current"
    assert (await repository.read()) == _artifact(1900.0)


@pytest.mark.asyncio
async def test_read_and_clear_when_empty(fake_mongo_database) -> None:
    repository = ForecastRepository(fake_mongo_database)

    assert await repository.read() is None
    assert await repository.clear() is False


@pytest.mark.asyncio
async def test_clear(fake_mongo_database) -> None:
    repository = ForecastRepository(fake_mongo_database)
    await repository.save(_artifact(1800.0))

    assert await repository.clear() is True
    assert await repository.read() is None


@pytest.mark.asyncio
async def test_database_errors_become_store_errors() -> None:
    class _BrokenCollection:
        def replace_one(self, *args, **kwargs):
            raise PyMongoError("not primary")

    class _BrokenDatabase:
        def get_collection(self, name):
            return _BrokenCollection()

    repository = ForecastRepository(_BrokenDatabase())

    with pytest.raises(ForecastStoreError):
        await repository.save(_artifact(1800.0))
