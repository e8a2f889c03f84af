"""Domain entities for memoized analytics results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(slots=True)
class CacheEntry:
    """A stored query result with its insertion time and time-to-live."""

    key: str
    data: Any
    timestamp: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.timestamp >= self.ttl

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "data": self.data,
            "timestamp": self.timestamp,
            "ttl": self.ttl,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CacheEntry":
        return cls(
            key=str(payload["key"]),
            data=payload.get("data"),
            timestamp=float(payload["timestamp"]),
            ttl=float(payload["ttl"]),
        )


@dataclass(slots=True)
class CacheStats:
    """Snapshot of cache occupancy and effectiveness."""

    total_entries: int
    valid_entries: int
    expired_entries: int
    hit_rate: float
    max_size: int
    usage_percent: float
