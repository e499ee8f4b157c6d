"""
Use Cases Package - Application Layer

This package contains use cases that implement the business logic
of the application. Use cases orchestrate the flow of data to and from
the entities and implement the business rules of the application.
"""

from .billing_use_case import BillingUseCase
from .forecast_use_cases import (
    ClearForecastUseCase,
    ForecastNotFoundError,
    GetForecastUseCase,
)
from .retrain_use_case import RetrainUseCase
from .telemetry_export_use_case import TelemetryExportUseCase
from .upload_management_use_case import UploadManagementUseCase

__all__ = [
    "BillingUseCase",
    "ClearForecastUseCase",
    "ForecastNotFoundError",
    "GetForecastUseCase",
    "RetrainUseCase",
    "TelemetryExportUseCase",
    "UploadManagementUseCase",
]
