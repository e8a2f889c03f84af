"""
Repositories Package - Infrastructure Layer

This package contains concrete implementations of the repository
interfaces defined in the domain layer. These implementations
handle the details of data persistence.
"""

from .alert_repositories import (
    KeyValueAlertHistoryRepository,
    KeyValueAlertThresholdRepository,
)
from .key_value_stores import InMemoryKeyValueStore, MongoKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueAlertHistoryRepository",
    "KeyValueAlertThresholdRepository",
    "MongoKeyValueStore",
]
