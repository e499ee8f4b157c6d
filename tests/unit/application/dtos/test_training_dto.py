from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from aquacast.application.dtos.training_dto import (
    RetrainProgressDTO,
    RetrainRequestDTO,
    TrainingServiceResponseDTO,
)
from aquacast.domain.entities.retrain_progress import RetrainPhase, RetrainProgress
from tests.conftest import make_training_payload


def test_decode_training_response() -> None:
    response = TrainingServiceResponseDTO.model_validate(make_training_payload())

    assert [p.period for p in response.daily] == ["2025-01-03", "2025-01-04"]
    assert response.daily[0].value == 1800.0
    assert response.daily[0].lower == 1500.0
    assert response.daily[1].lower is None
    assert response.weekly[0].period == "2025-01-06/2025-01-12"
    assert response.monthly[0].upper == 58000.0
    assert response.metrics.train_size == 40
    assert response.metadata.model == "prophet"
    assert response.evaluation() == {
        "holdout_days": 10,
        "mae": 0.12,
        "rmse": 0.2,
        "mape": 8.5,
        "train_size": 40,
        "test_size": 10,
    }


def test_evaluation_flattens_nested_service_evaluation() -> None:
    payload = make_training_payload(mape=12.0)
    payload["metadata"]["evaluation"] = {"mape": 99.0, "horizon_days": 30}

    evaluation = TrainingServiceResponseDTO.model_validate(payload).evaluation()

    assert "evaluation" not in evaluation
    assert evaluation["horizon_days"] == 30
    assert evaluation["mape"] == 12.0


def test_decode_enveloped_response_with_nested_metrics() -> None:
    payload = make_training_payload()
    metrics = payload.pop("metrics")
    metrics["trainSize"] = metrics.pop("train_size")
    metrics["testSize"] = metrics.pop("test_size")
    payload["metadata"]["metrics"] = metrics

    response = TrainingServiceResponseDTO.model_validate({"data": payload})

    assert response.metrics.mape == 8.5
    assert response.metrics.train_size == 40
    assert response.metrics.test_size == 10


@pytest.mark.parametrize("missing", ["daily", "weekly", "monthly", "metrics"])
def test_missing_sections_are_rejected(missing) -> None:
    payload = make_training_payload()
    del payload[missing]

    with pytest.raises(ValidationError):
        TrainingServiceResponseDTO.model_validate(payload)


def test_incomplete_metrics_are_rejected() -> None:
    payload = make_training_payload()
    del payload["metrics"]["rmse"]

    with pytest.raises(ValidationError):
        TrainingServiceResponseDTO.model_validate(payload)


def test_point_without_value_is_rejected() -> None:
    payload = make_training_payload()
    payload["daily"] = [{"date": "2025-01-03"}]

    with pytest.raises(ValidationError):
        TrainingServiceResponseDTO.model_validate(payload)


def test_retrain_request_defaults_to_telemetry() -> None:
    assert RetrainRequestDTO().use_telemetry is True


def test_progress_dto_from_entity() -> None:
    progress = RetrainProgress(upload_id=uuid4())
    progress.advance(RetrainPhase.UPLOADING, "Loading uploaded file")

    dto = RetrainProgressDTO.from_entity(progress, running=True)

    assert dto.phase == RetrainPhase.UPLOADING
    assert dto.progress == 10
    assert dto.running is True
    assert dto.log[0].message == "Loading uploaded file"
