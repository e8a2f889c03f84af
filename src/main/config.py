"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.shared import EnumEnvironment, EnumLogLevel, EnumStorageBackend
from src.shared.consts import ALL_STATIONS


class APISettings(BaseSettings):
    """HTTP API configuration settings."""

    title: str = Field(default="Station Analytics Engine", description="API title")
    description: str = Field(
        default="Cached metrics, sales forecasting and threshold alerts "
        "for fuel station operations",
        description="API description",
    )
    version: str = Field(default="1.0.0", description="API version")
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="API_", case_sensitive=False, extra="ignore"
    )


class CacheSettings(BaseSettings):
    """Result cache configuration settings."""

    max_size: int = Field(default=100, ge=1, description="Maximum cached entries")
    default_ttl_seconds: float = Field(
        default=300, gt=0, description="TTL for metrics, comparison and chart data"
    )
    forecast_ttl_seconds: float = Field(default=1800, gt=0)
    export_ttl_seconds: float = Field(default=600, gt=0)
    persist_to_storage: bool = Field(
        default=True, description="Persist the entry set to the key-value store"
    )
    sweep_interval_seconds: float = Field(default=60, gt=0)
    backup_max_age_seconds: float = Field(
        default=86400, gt=0, description="Age after which backup metrics are ignored"
    )

    model_config = SettingsConfigDict(
        env_prefix="CACHE_", case_sensitive=False, extra="ignore"
    )


class RecordStoreSettings(BaseSettings):
    """Table API (record store) configuration settings."""

    base_url: str = Field(
        default="http://localhost:8080", description="Table API base URL"
    )
    api_token: Optional[str] = Field(default=None, description="Bearer token")
    sales_reports_table_id: int = Field(default=12356)
    sms_history_table_id: int = Field(default=12613)
    page_size: int = Field(default=1000, ge=1)
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="RECORD_STORE_", case_sensitive=False, extra="ignore"
    )


class EmailSettings(BaseSettings):
    """Email delivery API configuration settings."""

    api_url: str = Field(
        default="http://localhost:8080/api/email/send",
        description="Email delivery endpoint",
    )
    api_token: Optional[str] = Field(default=None, description="Bearer token")
    sender: str = Field(
        default="alerts@example.com", description="Sender address of alert emails"
    )
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_", case_sensitive=False, extra="ignore"
    )


class StorageSettings(BaseSettings):
    """Durable key-value storage configuration settings."""

    backend: EnumStorageBackend = Field(
        default=EnumStorageBackend.MEMORY, description="Key-value store backend"
    )
    mongo_uri: str = Field(
        default="mongodb://localhost:27017/analytics_db",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="analytics_db", description="Name of the MongoDB database"
    )
    collection_name: str = Field(
        default="kv_store", description="Collection holding key-value documents"
    )

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_", case_sensitive=False, extra="ignore"
    )


class AlertSettings(BaseSettings):
    """Alert monitoring configuration settings."""

    monitoring_enabled: bool = Field(
        default=True, description="Run the periodic alert monitoring cycle"
    )
    check_interval_seconds: float = Field(default=60, gt=0)
    timeframe: str = Field(
        default="today", description="Timeframe of the monitored metrics"
    )
    stations: List[str] = Field(
        default_factory=lambda: [ALL_STATIONS],
        description="Stations of the monitored metrics",
    )
    history_limit: int = Field(default=100, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="ALERTS_", case_sensitive=False, extra="ignore"
    )


class ForecastSettings(BaseSettings):
    """Forecast engine configuration settings."""

    lookback_days: int = Field(default=90, ge=1)
    min_history_days: int = Field(default=7, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    record_store: RecordStoreSettings = Field(default_factory=RecordStoreSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    alerts: AlertSettings = Field(default_factory=AlertSettings)
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

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

    Used to be mocked in tests, allowing different settings based on enviroment.
    """
    return AppSettings()
