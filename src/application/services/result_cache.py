"""
Result Cache - Application Layer

TTL-keyed memoization of analytics query results with insertion-ordered
(FIFO) eviction and optional persistence of the entry set into the
durable key-value store.

Expired entries are never returned but stay in memory until the next
``sweep``. Storage failures are logged and absorbed: the cache keeps
working from memory alone.
"""

import json
import time
from typing import Any, Callable, Dict, List, Optional

import structlog

from src.domain.entities.cache import CacheEntry, CacheStats
from src.domain.entities.errors import StorageUnavailableError
from src.domain.repositories.key_value_store import IKeyValueStore
from src.shared.consts import CACHE_BACKUP_KEY, CACHE_STORAGE_KEY

logger = structlog.get_logger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_SECONDS = 5 * 60
BACKUP_MAX_AGE_SECONDS = 24 * 60 * 60


def build_cache_key(category: str, *params: Any) -> str:
    """
    Build the cache key for a category and its parameters.

    Each parameter is JSON-encoded with sorted object keys, so deep-equal
    inputs always produce the same key while parameter order still matters.
    """
    encoded = [
        json.dumps(param, sort_keys=True, separators=(",", ":"), default=str)
        for param in params
    ]
    return f"{category}:" + ":".join(encoded)


class ResultCache:
    """In-memory TTL cache with durable snapshot persistence."""

    def __init__(
        self,
        store: IKeyValueStore,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        persist_to_storage: bool = True,
        backup_max_age: float = BACKUP_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache.

        Args:
            store: Durable key-value store for snapshots and the metrics backup
            max_size: Maximum number of entries held in memory
            default_ttl: TTL in seconds used when ``set`` is given none
            persist_to_storage: Save the entry set after every mutation
            backup_max_age: Age in seconds after which the backup is ignored
            clock: Source of the current time in seconds
        """
        self.store = store
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.persist_to_storage = persist_to_storage
        self.backup_max_age = backup_max_age
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    async def initialize(self) -> None:
        """Load the persisted entry set, dropping whatever has expired since."""
        if not self.persist_to_storage:
            return

        try:
            stored = await self.store.get_item(CACHE_STORAGE_KEY)
        except StorageUnavailableError as exc:
            logger.warning("cache.load.unavailable", error=exc.message)
            return

        if not stored:
            return

        try:
            entries = [CacheEntry.from_dict(item) for _, item in json.loads(stored)]
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning("cache.load.corrupt", error=str(exc))
            self._entries = {}
            return

        self._entries = {entry.key: entry for entry in entries}
        logger.info("cache.loaded", entries=len(self._entries))
        await self.sweep()

        # The snapshot may predate a lower max_size
        if len(self._entries) > self.max_size:
            while len(self._entries) > self.max_size:
                self._evict_oldest()
            await self._persist()

    async def close(self) -> None:
        """Flush the current entry set to storage."""
        if self.persist_to_storage:
            await self._save()

    def get(self, category: str, *params: Any) -> Optional[Any]:
        """
        Return the cached data for a key, or ``None`` when missing or expired.

        Every lookup counts as a hit or a miss for the hit-rate statistic.
        """
        key = build_cache_key(category, *params)
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            self._misses += 1
            return None

        self._hits += 1
        return entry.data

    async def set(
        self, category: str, *params: Any, data: Any, ttl: Optional[float] = None
    ) -> None:
        """
        Insert or overwrite an entry.

        Inserting a new key into a full cache evicts exactly the entry with
        the oldest timestamp first.
        """
        key = build_cache_key(category, *params)
        if key in self._entries:
            # Re-inserted keys move to the back of the insertion order
            del self._entries[key]
        elif len(self._entries) >= self.max_size:
            self._evict_oldest()

        self._entries[key] = CacheEntry(
            key=key,
            data=data,
            timestamp=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )
        await self._persist()

    async def invalidate(self, category: str, *params: Any) -> int:
        """
        Remove one key when params are given, else every key of the category.

        Returns:
            Number of removed entries
        """
        if params:
            keys = [build_cache_key(category, *params)]
        else:
            prefix = f"{category}:"
            keys = [key for key in self._entries if key.startswith(prefix)]

        removed = 0
        for key in keys:
            if self._entries.pop(key, None) is not None:
                removed += 1

        logger.debug("cache.invalidated", category=category, removed=removed)
        await self._persist()
        return removed

    async def sweep(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug("cache.swept", removed=len(expired))
            await self._persist()
        return len(expired)

    async def clear(self) -> None:
        """Drop every entry and the persisted snapshot."""
        self._entries.clear()
        if not self.persist_to_storage:
            return
        try:
            await self.store.remove_item(CACHE_STORAGE_KEY)
        except StorageUnavailableError as exc:
            logger.warning("cache.clear.unavailable", error=exc.message)

    def stats(self) -> CacheStats:
        now = self._clock()
        expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        total = len(self._entries)
        lookups = self._hits + self._misses

        return CacheStats(
            total_entries=total,
            valid_entries=total - expired,
            expired_entries=expired,
            hit_rate=self._hits / lookups * 100 if lookups else 0.0,
            max_size=self.max_size,
            usage_percent=total / self.max_size * 100 if self.max_size else 0.0,
        )

    def update_config(
        self,
        max_size: Optional[int] = None,
        default_ttl: Optional[float] = None,
        persist_to_storage: Optional[bool] = None,
    ) -> None:
        """Change limits at runtime; shrinking evicts the oldest entries."""
        if max_size is not None:
            if max_size < 1:
                raise ValueError("max_size must be at least 1")
            self.max_size = max_size
            while len(self._entries) > self.max_size:
                self._evict_oldest()
        if default_ttl is not None:
            self.default_ttl = default_ttl
        if persist_to_storage is not None:
            self.persist_to_storage = persist_to_storage

    def export_cache(self) -> Dict[str, Any]:
        """Debug dump of entries, configuration and statistics."""
        stats = self.stats()
        return {
            "entries": [entry.to_dict() for entry in self._entries.values()],
            "config": {
                "max_size": self.max_size,
                "default_ttl": self.default_ttl,
                "persist_to_storage": self.persist_to_storage,
            },
            "stats": {
                "total_entries": stats.total_entries,
                "valid_entries": stats.valid_entries,
                "expired_entries": stats.expired_entries,
                "hit_rate": stats.hit_rate,
                "max_size": stats.max_size,
                "usage_percent": stats.usage_percent,
            },
        }

    async def set_backup_metrics(self, data: Any) -> None:
        """Store the latest metrics payload outside the TTL/eviction regime."""
        try:
            payload = json.dumps({"data": data, "timestamp": self._clock()}, default=str)
            await self.store.set_item(CACHE_BACKUP_KEY, payload)
        except StorageUnavailableError as exc:
            logger.warning("cache.backup.save_failed", error=exc.message)
        except (TypeError, ValueError) as exc:
            logger.warning("cache.backup.unserializable", error=str(exc))

    async def get_backup_metrics(self) -> Optional[Any]:
        """Return the backup metrics if younger than ``backup_max_age``."""
        try:
            stored = await self.store.get_item(CACHE_BACKUP_KEY)
        except StorageUnavailableError as exc:
            logger.warning("cache.backup.load_failed", error=exc.message)
            return None

        if not stored:
            return None

        try:
            backup = json.loads(stored)
            age = self._clock() - float(backup["timestamp"])
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning("cache.backup.corrupt", error=str(exc))
            return None

        if age >= self.backup_max_age:
            return None
        return backup.get("data")

    def _evict_oldest(self) -> None:
        if not self._entries:
            return
        # min() keeps the first of equal timestamps, i.e. the earliest inserted
        oldest = min(self._entries.values(), key=lambda entry: entry.timestamp)
        del self._entries[oldest.key]
        logger.debug("cache.evicted", key=oldest.key)

    async def _persist(self) -> None:
        if self.persist_to_storage:
            await self._save()

    async def _save(self) -> None:
        snapshot: List[List[Any]] = [
            [key, entry.to_dict()] for key, entry in self._entries.items()
        ]
        try:
            await self.store.set_item(CACHE_STORAGE_KEY, json.dumps(snapshot, default=str))
        except StorageUnavailableError as exc:
            logger.warning("cache.persist.failed", error=exc.message)
        except (TypeError, ValueError) as exc:
            logger.warning("cache.persist.unserializable", error=str(exc))
