"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Annotated, Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from aquacast.domain.entities.pricing import PricingSettings, PricingTier
from aquacast.domain.services.dataset_normalizer import (
    DEFAULT_DATE_COLUMNS,
    DEFAULT_VOLUME_COLUMNS,
)
from aquacast.shared import EnumEnvironment, EnumLogLevel
from aquacast.shared.env import load_secret_file_variables  # noqa: F401


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017/aquacast",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="aquacast", description="Name of the MongoDB database"
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class GESettings(BaseSettings):
    """HTTP service configuration settings."""

    title: str = Field(default="AquaCast", description="Service title")
    description: str = Field(
        default="Historical water consumption ingestion and forecast retraining",
        description="Service description",
    )
    version: str = Field(default="1.0.0", description="Service version")
    git_commit: str = Field(
        default="unknown",
        description="Git commit hash",
        validation_alias=AliasChoices("GE_GIT_COMMIT", "GIT_COMMIT"),
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="GE_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format",
    )
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class InfluxSettings(BaseSettings):
    """InfluxDB telemetry storage settings."""

    url: str = Field(default="http://localhost:8086", description="InfluxDB URL")
    token: str = Field(default="", description="InfluxDB API token")
    org: str = Field(default="aquacast", description="InfluxDB organization")
    bucket: str = Field(default="water", description="Bucket of meter readings")
    measurement: str = Field(
        default="water_reading", description="Measurement of meter readings"
    )
    field: str = Field(
        default="total_volume", description="Cumulative volume field (liters)"
    )
    device_id: str = Field(
        default="water_meter_01", description="Meter merged into training data"
    )
    timeout_seconds: float = Field(
        default=30.0, gt=0, description="InfluxDB request timeout"
    )

    model_config = SettingsConfigDict(
        env_prefix="INFLUX_", case_sensitive=False, extra="ignore"
    )


class TrainingSettings(BaseSettings):
    """External training service settings."""

    service_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the training service",
        validation_alias=AliasChoices("TRAINING_SERVICE_URL", "PYTHON_SERVER_URL"),
    )
    timeout_seconds: float = Field(
        default=300.0, gt=0, description="Time budget of one training request"
    )
    telemetry_window_days: int = Field(
        default=30, ge=1, description="Trailing telemetry window merged on retrain"
    )
    auto_retrain: bool = Field(
        default=True, description="Retrain automatically after each upload"
    )

    model_config = SettingsConfigDict(
        env_prefix="TRAINING_", case_sensitive=False, extra="ignore"
    )


class UploadSettings(BaseSettings):
    """Upload acceptance settings."""

    max_bytes: int = Field(
        default=10 * 1024 * 1024, gt=0, description="Maximum upload size"
    )
    date_columns: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_DATE_COLUMNS),
        description="Accepted date column headers (comma separated)",
    )
    volume_columns: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_VOLUME_COLUMNS),
        description="Accepted volume column headers (comma separated)",
    )

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_", case_sensitive=False, extra="ignore"
    )

    @field_validator("date_columns", "volume_columns", mode="before")
    @classmethod
    def _split(cls, value: Any) -> Any:
        return _split_csv(value)


class PricingTierSettings(BaseModel):
    min_volume: float = Field(ge=0)
    max_volume: Optional[float] = None
    price_per_unit: float = Field(ge=0)


def _default_tiers() -> List[PricingTierSettings]:
    return [
        PricingTierSettings(min_volume=0, max_volume=10, price_per_unit=3000),
        PricingTierSettings(min_volume=10, max_volume=20, price_per_unit=4500),
        PricingTierSettings(min_volume=20, max_volume=None, price_per_unit=6000),
    ]


class BillingSettings(BaseSettings):
    """Water tariff settings."""

    tiers: List[PricingTierSettings] = Field(
        default_factory=_default_tiers,
        description="Price tiers as a JSON list",
    )
    operational_cost: float = Field(
        default=5000.0, ge=0, description="Fixed monthly cost"
    )
    payment_due_day: int = Field(
        default=20, ge=1, le=28, description="Day of month payment is due"
    )

    model_config = SettingsConfigDict(
        env_prefix="PRICING_", case_sensitive=False, extra="ignore"
    )

    def to_entity(self) -> PricingSettings:
        return PricingSettings(
            tiers=[
                PricingTier(
                    min_volume=tier.min_volume,
                    max_volume=tier.max_volume,
                    price_per_unit=tier.price_per_unit,
                )
                for tier in self.tiers
            ],
            operational_cost=self.operational_cost,
            payment_due_day=self.payment_due_day,
        )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    ge: GESettings = Field(default_factory=GESettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    influx: InfluxSettings = Field(default_factory=InfluxSettings)
    training: TrainingSettings = Field(default_factory=TrainingSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    pricing: BillingSettings = Field(default_factory=BillingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()


settings = get_settings()
