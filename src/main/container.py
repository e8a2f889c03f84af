"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from src.application.services.analytics_cache import AnalyticsCache
from src.application.services.result_cache import ResultCache
from src.application.use_cases.alert_monitoring_use_case import AlertMonitoringUseCase
from src.application.use_cases.alert_use_cases import AlertEngine
from src.application.use_cases.cache_use_cases import CacheManagementUseCase
from src.application.use_cases.forecast_use_case import (
    ForecastEngine,
    GetForecastUseCase,
)
from src.infrastructure.database import MongoDatabase
from src.infrastructure.gateways.email_gateway import HTTPEmailGateway
from src.infrastructure.gateways.sales_metrics_provider import SalesMetricsProvider
from src.infrastructure.gateways.sms_history_gateway import SMSHistoryGateway
from src.infrastructure.gateways.table_api_gateway import TableAPIGateway
from src.infrastructure.repositories.alert_repositories import (
    KeyValueAlertHistoryRepository,
    KeyValueAlertThresholdRepository,
)
from src.infrastructure.repositories.key_value_stores import (
    InMemoryKeyValueStore,
    MongoKeyValueStore,
)
from src.infrastructure.services.background_tasks import (
    create_alert_monitor,
    create_cache_sweeper,
)
from src.shared import EnumStorageBackend, get_logger

from .config import AppSettings

logger = get_logger(__name__)


def _enum_value(value):
    return value.value if hasattr(value, "value") else str(value)


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
        mongo_uri=config.storage.mongo_uri,
        db_name=config.storage.database_name,
        kv_collection=config.storage.collection_name,
    )

    key_value_store = providers.Selector(
        providers.Callable(_enum_value, config.storage.backend),
        memory=providers.Singleton(InMemoryKeyValueStore),
        mongo=providers.Singleton(MongoKeyValueStore, mongo_database=mongo_database),
    )

    alert_threshold_repository = providers.Singleton(
        KeyValueAlertThresholdRepository,
        store=key_value_store,
    )

    alert_history_repository = providers.Singleton(
        KeyValueAlertHistoryRepository,
        store=key_value_store,
    )

    # Gateways
    record_store_gateway = providers.Singleton(
        TableAPIGateway,
        base_url=config.record_store.base_url,
        api_token=config.record_store.api_token,
        timeout=config.record_store.timeout_seconds,
    )

    email_gateway = providers.Singleton(
        HTTPEmailGateway,
        api_url=config.email.api_url,
        default_sender=config.email.sender,
        api_token=config.email.api_token,
        timeout=config.email.timeout_seconds,
    )

    sms_gateway = providers.Singleton(
        SMSHistoryGateway,
        record_store=record_store_gateway,
        table_id=config.record_store.sms_history_table_id,
    )

    metrics_provider = providers.Singleton(
        SalesMetricsProvider,
        record_store=record_store_gateway,
        table_id=config.record_store.sales_reports_table_id,
        page_size=config.record_store.page_size,
    )

    # Application services
    result_cache = providers.Singleton(
        ResultCache,
        store=key_value_store,
        max_size=config.cache.max_size,
        default_ttl=config.cache.default_ttl_seconds,
        persist_to_storage=config.cache.persist_to_storage,
        backup_max_age=config.cache.backup_max_age_seconds,
    )

    analytics_cache = providers.Singleton(
        AnalyticsCache,
        cache=result_cache,
        forecast_ttl=config.cache.forecast_ttl_seconds,
        export_ttl=config.cache.export_ttl_seconds,
    )

    forecast_engine = providers.Singleton(
        ForecastEngine,
        record_store=record_store_gateway,
        sales_table_id=config.record_store.sales_reports_table_id,
        lookback_days=config.forecast.lookback_days,
        min_history_days=config.forecast.min_history_days,
        page_size=config.record_store.page_size,
    )

    # Singleton: the engine holds the per-threshold cooldown state
    alert_engine = providers.Singleton(
        AlertEngine,
        threshold_repository=alert_threshold_repository,
        history_repository=alert_history_repository,
        email_gateway=email_gateway,
        sms_gateway=sms_gateway,
        history_limit=config.alerts.history_limit,
    )

    # Application (use cases)
    get_forecast_use_case = providers.Factory(
        GetForecastUseCase,
        forecast_engine=forecast_engine,
        analytics_cache=analytics_cache,
    )

    alert_monitoring_use_case = providers.Factory(
        AlertMonitoringUseCase,
        alert_engine=alert_engine,
        analytics_cache=analytics_cache,
        metrics_provider=metrics_provider,
        timeframe=config.alerts.timeframe,
        stations=config.alerts.stations,
    )

    cache_management_use_case = providers.Factory(
        CacheManagementUseCase,
        analytics_cache=analytics_cache,
    )

    # Background tasks
    cache_sweeper = providers.Singleton(
        create_cache_sweeper,
        analytics_cache=analytics_cache,
        interval=config.cache.sweep_interval_seconds,
    )

    alert_monitor = providers.Singleton(
        create_alert_monitor,
        monitoring_use_case=alert_monitoring_use_case,
        interval=config.alerts.check_interval_seconds,
        enabled=config.alerts.monitoring_enabled,
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

    Loads the persisted cache, starts the cache sweeper and the alert
    monitor, and on shutdown stops them and flushes the cache before
    closing the database connection.
    """
    container = get_container()

    uses_mongo = (
        _enum_value(container.config.storage.backend()) == EnumStorageBackend.MONGO.value
    )
    mongo_database = container.mongo_database() if uses_mongo else None

    if mongo_database is not None:
        logger.info("container.mongo.ensure_connection")
        await mongo_database.create_indexes()

    analytics_cache = container.analytics_cache()
    await analytics_cache.initialize()

    cache_sweeper = container.cache_sweeper()
    alert_monitor = container.alert_monitor()
    cache_sweeper.start()
    alert_monitor.start()
    logger.info("container.resources.initialized")

    try:
        yield container

    finally:
        await alert_monitor.stop()
        await cache_sweeper.stop()
        await analytics_cache.close()

        if mongo_database is not None:
            logger.info("container.mongo.close")
            mongo_database.close()

        logger.info("container.resources.shutdown")
