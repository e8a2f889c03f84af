"""
Cache DTOs - Application Layer
"""

from pydantic import BaseModel, Field

from src.domain.entities.cache import CacheStats


class CacheStatsDTO(BaseModel):
    """Occupancy and hit-rate statistics of the result cache."""

    total_entries: int
    valid_entries: int
    expired_entries: int
    hit_rate: float = Field(description="Percentage of lookups served from cache")
    max_size: int
    usage_percent: float

    @classmethod
    def from_entity(cls, stats: CacheStats) -> "CacheStatsDTO":
        return cls(
            total_entries=stats.total_entries,
            valid_entries=stats.valid_entries,
            expired_entries=stats.expired_entries,
            hit_rate=stats.hit_rate,
            max_size=stats.max_size,
            usage_percent=stats.usage_percent,
        )
