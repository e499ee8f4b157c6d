from __future__ import annotations

import httpx
import pytest

from aquacast.domain.entities.errors import (
    InvalidTrainingResponseError,
    RemoteTimeoutError,
    RemoteTrainingFailedError,
    TrainingServiceUnavailableError,
)
from aquacast.infrastructure.gateways.training_service_gateway import (
    TrainingServiceGateway,
)


def _patch_transport(monkeypatch, handler) -> None:
    original = httpx.AsyncClient

    def _client(*args, **kwargs):
        return original(*args, transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", _client)


@pytest.mark.asyncio
async def test_train_posts_multipart_workbook(monkeypatch, training_payload) -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json=training_payload)

    _patch_transport(monkeypatch, handler)

    payload = await TrainingServiceGateway("http://trainer:5000/").train(
        b"PK-workbook", "training_data.xlsx"
    )

    assert payload == training_payload
    request = captured["request"]
    assert request.method == "POST"
    assert str(request.url) == "http://trainer:5000/api/train"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="file"; filename="training_data.xlsx"' in request.content
    assert b"PK-workbook" in request.content


@pytest.mark.asyncio
async def test_http_error_is_remote_failure(monkeypatch) -> None:
    _patch_transport(
        monkeypatch, lambda request: httpx.Response(500, text="model error")
    )

    with pytest.raises(RemoteTrainingFailedError) as exc_info:
        await TrainingServiceGateway("http://trainer:5000").train(b"x", "t.xlsx")

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Training failed: model error"


@pytest.mark.asyncio
async def test_timeout(monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    _patch_transport(monkeypatch, handler)

    with pytest.raises(RemoteTimeoutError):
        await TrainingServiceGateway("http://trainer:5000", timeout=2).train(
            b"x", "t.xlsx"
        )


@pytest.mark.asyncio
async def test_unreachable_service(monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _patch_transport(monkeypatch, handler)

    with pytest.raises(TrainingServiceUnavailableError) as exc_info:
        await TrainingServiceGateway("http://trainer:5000").train(b"x", "t.xlsx")

    assert "http://trainer:5000" in exc_info.value.message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json=[1, 2, 3]),
    ],
)
async def test_unexpected_body(monkeypatch, response) -> None:
    _patch_transport(monkeypatch, lambda request: response)

    with pytest.raises(InvalidTrainingResponseError):
        await TrainingServiceGateway("http://trainer:5000").train(b"x", "t.xlsx")
