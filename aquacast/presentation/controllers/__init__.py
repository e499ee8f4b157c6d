"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .billing_controller import router as billing_router
from .forecast_controller import router as forecast_router
from .telemetry_controller import router as telemetry_router
from .uploads_controller import router as uploads_router

__all__ = ["uploads_router", "forecast_router", "telemetry_router", "billing_router"]
