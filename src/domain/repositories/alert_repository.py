"""
Alert Repository Interfaces

Persistence of alert thresholds and of the alert notification history.
"""

from abc import ABC, abstractmethod
from typing import List

from src.domain.entities.alert import AlertNotification, AlertThreshold


class IAlertThresholdRepository(ABC):
    """Interface for alert threshold persistence."""

    @abstractmethod
    async def find_all(self) -> List[AlertThreshold]:
        """
        Return every configured threshold.

        Raises:
            AlertConfigParseError: When the stored configuration is corrupt
        """
        pass

    @abstractmethod
    async def save_all(self, thresholds: List[AlertThreshold]) -> None:
        """Replace the stored thresholds."""
        pass

    @abstractmethod
    async def exists(self) -> bool:
        """Whether any threshold configuration has been persisted yet."""
        pass


class IAlertHistoryRepository(ABC):
    """Interface for the most-recent-first alert notification log."""

    @abstractmethod
    async def load(self) -> List[AlertNotification]:
        """Return the full history, most recent first."""
        pass

    @abstractmethod
    async def save(self, history: List[AlertNotification]) -> None:
        """Replace the stored history."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove all history."""
        pass
