"""
Domain Repositories Package

Persistence interfaces of the analytics engine.
"""

from .alert_repository import IAlertHistoryRepository, IAlertThresholdRepository
from .key_value_store import IKeyValueStore

__all__ = [
    "IAlertHistoryRepository",
    "IAlertThresholdRepository",
    "IKeyValueStore",
]
