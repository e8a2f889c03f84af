"""
Use Cases Package - Application Layer

This package contains the use cases of the analytics engine: forecasting,
alert evaluation and monitoring, and cache management.
"""

from .alert_monitoring_use_case import AlertMonitoringUseCase
from .alert_use_cases import AlertEngine
from .cache_use_cases import CacheManagementUseCase
from .forecast_use_case import ForecastEngine, GetForecastUseCase

__all__ = [
    "AlertEngine",
    "AlertMonitoringUseCase",
    "CacheManagementUseCase",
    "ForecastEngine",
    "GetForecastUseCase",
]
