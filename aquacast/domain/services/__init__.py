"""Pure domain services."""

from aquacast.domain.services.accuracy import (
    AccuracyAssessment,
    AccuracyRating,
    rate_mape,
)
from aquacast.domain.services.billing import (
    calculate_total_bill,
    calculate_water_cost,
    get_billing_period,
)
from aquacast.domain.services.consolidator import consolidate
from aquacast.domain.services.dataset_normalizer import (
    DEFAULT_DATE_COLUMNS,
    DEFAULT_VOLUME_COLUMNS,
    NormalizationResult,
    normalize_dataset,
)
from aquacast.domain.services.fingerprint import compute_fingerprint

__all__ = [
    "AccuracyAssessment",
    "AccuracyRating",
    "DEFAULT_DATE_COLUMNS",
    "DEFAULT_VOLUME_COLUMNS",
    "NormalizationResult",
    "calculate_total_bill",
    "calculate_water_cost",
    "compute_fingerprint",
    "consolidate",
    "get_billing_period",
    "normalize_dataset",
    "rate_mape",
]
