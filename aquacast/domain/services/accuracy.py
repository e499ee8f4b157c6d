"""Accuracy rating of a trained forecast based on its MAPE."""

from dataclasses import dataclass
from enum import Enum


class AccuracyRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True, slots=True)
class AccuracyAssessment:
    rating: AccuracyRating
    interpretation: str


def rate_mape(mape: float) -> AccuracyAssessment:
    """Rate a mean absolute percentage error (in percent)."""
    if mape < 10:
        return AccuracyAssessment(
            AccuracyRating.EXCELLENT,
            "Excellent - Model predictions are highly accurate",
        )
    if mape < 20:
        return AccuracyAssessment(
            AccuracyRating.GOOD, "Good - Model predictions are reasonably accurate"
        )
    if mape < 30:
        return AccuracyAssessment(
            AccuracyRating.FAIR, "Fair - Model predictions have moderate errors"
        )
    return AccuracyAssessment(
        AccuracyRating.POOR,
        "Poor - Model predictions have high errors, consider retraining",
    )
