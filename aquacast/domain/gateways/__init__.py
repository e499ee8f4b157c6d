"""
Gateways Package - Domain Layer

This package contains interfaces defining gateway contracts
for external service communications. Specific implementations
are provided by the infrastructure layer.
"""

from .telemetry_gateway import ITelemetryGateway
from .training_service_gateway import ITrainingServiceGateway

__all__ = ["ITelemetryGateway", "ITrainingServiceGateway"]
