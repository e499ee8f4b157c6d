"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict

from dependency_injector import containers, providers

from aquacast.application.use_cases.billing_use_case import BillingUseCase
from aquacast.application.use_cases.forecast_use_cases import (
    ClearForecastUseCase,
    GetForecastUseCase,
)
from aquacast.application.use_cases.retrain_use_case import RetrainUseCase
from aquacast.application.use_cases.telemetry_export_use_case import (
    TelemetryExportUseCase,
)
from aquacast.application.use_cases.upload_management_use_case import (
    UploadManagementUseCase,
)
from aquacast.domain.entities.pricing import PricingSettings
from aquacast.infrastructure.codecs.workbook_codec import WorkbookCodec
from aquacast.infrastructure.database import MongoDatabase
from aquacast.infrastructure.gateways.influx_telemetry_gateway import (
    InfluxTelemetryGateway,
)
from aquacast.infrastructure.gateways.training_service_gateway import (
    TrainingServiceGateway,
)
from aquacast.infrastructure.repositories.forecast_repository import (
    ForecastRepository,
)
from aquacast.infrastructure.repositories.gridfs_upload_file_repository import (
    GridFSUploadFileRepository,
)
from aquacast.infrastructure.repositories.upload_repository import UploadRepository
from aquacast.infrastructure.services.retrain_tracker import InMemoryRetrainTracker
from aquacast.shared import get_logger

from .config import AppSettings, BillingSettings

logger = get_logger(__name__)


def _pricing_settings(pricing: Dict[str, Any]) -> PricingSettings:
    return BillingSettings.model_validate(pricing or {}).to_entity()


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()
    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
    )

    upload_repository = providers.Singleton(
        UploadRepository,
        database=mongo_database,
    )

    forecast_repository = providers.Singleton(
        ForecastRepository,
        database=mongo_database,
    )

    # GridFS repository for raw upload bytes
    upload_file_repository = providers.Singleton(
        GridFSUploadFileRepository,
        mongo_client=providers.Callable(lambda db: db.client, mongo_database),
        database_name=config.database.database_name,
    )

    dataset_codec = providers.Singleton(WorkbookCodec)

    retrain_tracker = providers.Singleton(InMemoryRetrainTracker)

    # Gateways
    telemetry_gateway = providers.Singleton(
        InfluxTelemetryGateway,
        base_url=config.influx.url,
        token=config.influx.token,
        org=config.influx.org,
        bucket=config.influx.bucket,
        measurement=config.influx.measurement,
        field=config.influx.field,
        timeout=config.influx.timeout_seconds,
    )

    training_service_gateway = providers.Singleton(
        TrainingServiceGateway,
        base_url=config.training.service_url,
        timeout=config.training.timeout_seconds,
    )

    pricing_settings = providers.Singleton(_pricing_settings, config.pricing)

    # Application (use cases)
    retrain_use_case = providers.Factory(
        RetrainUseCase,
        upload_repository=upload_repository,
        upload_file_repository=upload_file_repository,
        forecast_repository=forecast_repository,
        telemetry_gateway=telemetry_gateway,
        training_gateway=training_service_gateway,
        dataset_codec=dataset_codec,
        retrain_tracker=retrain_tracker,
        device_id=config.influx.device_id,
        telemetry_window_days=config.training.telemetry_window_days,
        timeout_seconds=config.training.timeout_seconds,
        date_columns=config.upload.date_columns,
        volume_columns=config.upload.volume_columns,
    )

    # Singleton: owns the lock serializing duplicate checks with inserts
    upload_management_use_case = providers.Singleton(
        UploadManagementUseCase,
        upload_repository=upload_repository,
        upload_file_repository=upload_file_repository,
        forecast_repository=forecast_repository,
        dataset_codec=dataset_codec,
        retrain_use_case=retrain_use_case,
        max_upload_bytes=config.upload.max_bytes,
        auto_retrain=config.training.auto_retrain,
        date_columns=config.upload.date_columns,
        volume_columns=config.upload.volume_columns,
    )

    get_forecast_use_case = providers.Factory(
        GetForecastUseCase,
        forecast_repository=forecast_repository,
    )

    clear_forecast_use_case = providers.Factory(
        ClearForecastUseCase,
        forecast_repository=forecast_repository,
    )

    telemetry_export_use_case = providers.Factory(
        TelemetryExportUseCase,
        telemetry_gateway=telemetry_gateway,
        dataset_codec=dataset_codec,
        default_device_id=config.influx.device_id,
    )

    billing_use_case = providers.Factory(
        BillingUseCase,
        pricing_settings=pricing_settings,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for external resources.

    This async context manager is used in the FastAPI lifespan to create
    the MongoDB indexes on startup and close the connection on shutdown.
    """
    container = get_container()
    mongo_database = container.mongo_database()

    try:
        logger.info("container.mongo.ensure_connection")
        await mongo_database.create_indexes()
        logger.info("container.resources.initialized")
        yield container

    finally:
        logger.info("container.mongo.close")
        mongo_database.close()
        logger.info("container.resources.shutdown")
