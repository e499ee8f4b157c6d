"""
Gateways Package - Infrastructure Layer

This package contains concrete implementations of the gateway
interfaces defined in the domain layer. These implementations
handle the details of external service communications.
"""

from .influx_telemetry_gateway import InfluxTelemetryGateway
from .training_service_gateway import TrainingServiceGateway

__all__ = ["InfluxTelemetryGateway", "TrainingServiceGateway"]
