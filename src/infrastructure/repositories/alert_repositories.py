"""
Alert Repositories - Infrastructure Layer

Alert thresholds and the alert history are stored as JSON documents in
the key-value store.
"""

import json
from typing import List

import structlog

from src.domain.entities.alert import AlertNotification, AlertThreshold
from src.domain.entities.errors import AlertConfigParseError
from src.domain.repositories.alert_repository import (
    IAlertHistoryRepository,
    IAlertThresholdRepository,
)
from src.domain.repositories.key_value_store import IKeyValueStore
from src.shared.consts import ALERT_HISTORY_KEY, ALERT_THRESHOLDS_KEY

logger = structlog.get_logger(__name__)


class KeyValueAlertThresholdRepository(IAlertThresholdRepository):
    """Alert thresholds stored as one JSON list."""

    def __init__(self, store: IKeyValueStore, key: str = ALERT_THRESHOLDS_KEY):
        self.store = store
        self.key = key

    async def exists(self) -> bool:
        return bool(await self.store.get_item(self.key))

    async def find_all(self) -> List[AlertThreshold]:
        stored = await self.store.get_item(self.key)
        if not stored:
            return []
        try:
            payload = json.loads(stored)
            if not isinstance(payload, list):
                raise TypeError("expected a list of thresholds")
            return [AlertThreshold.from_dict(item) for item in payload]
        except (ValueError, TypeError, KeyError) as e:
            raise AlertConfigParseError(
                f"Stored alert thresholds are corrupt: {str(e)}",
                details={"key": self.key},
            ) from e

    async def save_all(self, thresholds: List[AlertThreshold]) -> None:
        payload = json.dumps([threshold.to_dict() for threshold in thresholds])
        await self.store.set_item(self.key, payload)


class KeyValueAlertHistoryRepository(IAlertHistoryRepository):
    """Alert history stored as one JSON list, most recent first."""

    def __init__(self, store: IKeyValueStore, key: str = ALERT_HISTORY_KEY):
        self.store = store
        self.key = key

    async def load(self) -> List[AlertNotification]:
        stored = await self.store.get_item(self.key)
        if not stored:
            return []
        try:
            return [AlertNotification.from_dict(item) for item in json.loads(stored)]
        except (ValueError, TypeError, KeyError) as e:
            logger.warning("alerts.history.corrupt", error=str(e))
            return []

    async def save(self, history: List[AlertNotification]) -> None:
        payload = json.dumps([notification.to_dict() for notification in history])
        await self.store.set_item(self.key, payload)

    async def clear(self) -> None:
        await self.store.remove_item(self.key)
