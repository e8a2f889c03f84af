"""
Key-Value Store Interface

Durable string storage used for cache persistence, alert configuration
and alert history.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IKeyValueStore(ABC):
    """Interface for durable key-value stores."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageUnavailableError: When the backend cannot be read
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageUnavailableError: When the backend cannot be written
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            StorageUnavailableError: When the backend cannot be written
        """
        pass
