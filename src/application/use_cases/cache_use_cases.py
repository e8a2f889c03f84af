"""
Cache Use Cases - Application Layer

Inspection and invalidation of the analytics result cache.
"""

from typing import Optional

from dependency_injector.wiring import Provide, inject

from ..dtos.cache_dto import CacheStatsDTO
from ..services.analytics_cache import AnalyticsCache


class CacheManagementUseCase:
    """Use case for cache statistics and invalidation."""

    @inject
    def __init__(self, analytics_cache: AnalyticsCache = Provide["analytics_cache"]):
        self.analytics_cache = analytics_cache

    def get_stats(self) -> CacheStatsDTO:
        return CacheStatsDTO.from_entity(self.analytics_cache.get_cache_stats())

    async def invalidate(self, category: Optional[str] = None) -> int:
        """
        Drop one category, or everything when no category is given.

        Raises:
            ValueError: If the category is unknown
        """
        if category is None:
            removed = len(self.analytics_cache.cache)
            await self.analytics_cache.clear_all()
            return removed
        return await self.analytics_cache.invalidate_category(category)
