"""
Domain Entities Package

This package contains the core domain entities of the analytics engine.
"""

from .alert import (
    AlertNotification,
    AlertOperator,
    AlertSeverity,
    AlertThreshold,
    NotificationMethod,
)
from .cache import CacheEntry, CacheStats
from .errors import (
    AlertConfigParseError,
    AlertDeliveryError,
    AlertThresholdNotFoundError,
    DomainError,
    InsufficientHistoryError,
    RecordStoreError,
    StorageUnavailableError,
)
from .forecast import ForecastModel, ForecastResult, TrendDirection
from .records import DailyRecord, ExpenseItem
from .time_series import DataPoint, SeasonalPattern

__all__ = [
    "AlertNotification",
    "AlertOperator",
    "AlertSeverity",
    "AlertThreshold",
    "NotificationMethod",
    "CacheEntry",
    "CacheStats",
    "DailyRecord",
    "ExpenseItem",
    "DataPoint",
    "SeasonalPattern",
    "ForecastModel",
    "ForecastResult",
    "TrendDirection",
    "DomainError",
    "InsufficientHistoryError",
    "StorageUnavailableError",
    "RecordStoreError",
    "AlertThresholdNotFoundError",
    "AlertConfigParseError",
    "AlertDeliveryError",
]
