from __future__ import annotations

from typing import Dict, cast

import pymongo.errors
import pytest

from aquacast.infrastructure.database.mongo_database import (
    UPLOADS_COLLECTION,
    MongoDatabase,
)
from tests.conftest import FakeCollection


class _StubMongoClient:
    def __init__(self, uri: str) -> None:
        self.uri = uri
        self.closed = False
        self.databases: Dict[str, _StubDatabase] = {}

    def __getitem__(self, name: str) -> "_StubDatabase":
        return self.databases.setdefault(name, _StubDatabase())

    def close(self) -> None:
        self.closed = True


class _StubDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class _FailingCollection(FakeCollection):
    def drop_index(self, index_name: str) -> None:
        raise pymongo.errors.OperationFailure("index not found")

    def create_index(self, keys, name=None, **kwargs):
        raise pymongo.errors.OperationFailure("duplicate key")


@pytest.fixture(autouse=True)
def patch_mongo_client(monkeypatch) -> None:
    monkeypatch.setattr(
        "aquacast.infrastructure.database.mongo_database.MongoClient",
        _StubMongoClient,
    )


def test_get_collection_and_close() -> None:
    database = MongoDatabase("mongodb://localhost:27017", "aquacast")

    assert database.get_collection("uploads") is database.db["uploads"]

    database.close()
    assert database.client.closed is True


@pytest.mark.asyncio
async def test_create_indexes() -> None:
    database = MongoDatabase("mongodb://localhost:27017", "aquacast")
    collection = cast(FakeCollection, database.db[UPLOADS_COLLECTION])

    await database.create_indexes()

    created = {entry[1]: entry[2] for entry in collection.created_indexes}
    assert created["upload_id_idx"] == {"unique": True}
    assert created["file_hash_unique_idx"] == {"unique": True}
    assert "uploaded_at_idx" in created
    assert "status_updated_idx" in created
    assert collection.dropped_indexes == ["file_hash_idx"]


@pytest.mark.asyncio
async def test_create_indexes_tolerates_operation_failures() -> None:
    database = MongoDatabase("mongodb://localhost:27017", "aquacast")
    database.db.collections[UPLOADS_COLLECTION] = _FailingCollection()

    await database.create_indexes()
