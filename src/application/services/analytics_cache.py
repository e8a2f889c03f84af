"""
Analytics Cache - Application Layer

Category facade over ``ResultCache`` used by the dashboard: metrics,
comparison, forecast, chart and export results, each with its own default
time-to-live.
"""

from typing import Any, List, Optional

import structlog

from src.domain.entities.cache import CacheStats

from .result_cache import ResultCache

logger = structlog.get_logger(__name__)

METRICS = "metrics"
COMPARISON = "comparison"
FORECAST = "forecast"
CHART = "chart"
EXPORT = "export"

CATEGORIES = (METRICS, COMPARISON, FORECAST, CHART, EXPORT)

FORECAST_TTL_SECONDS = 30 * 60
EXPORT_TTL_SECONDS = 10 * 60


class AnalyticsCache:
    """Typed accessors for each analytics result category."""

    def __init__(
        self,
        cache: ResultCache,
        forecast_ttl: float = FORECAST_TTL_SECONDS,
        export_ttl: float = EXPORT_TTL_SECONDS,
    ):
        self.cache = cache
        self.forecast_ttl = forecast_ttl
        self.export_ttl = export_ttl

    async def initialize(self) -> None:
        await self.cache.initialize()

    async def close(self) -> None:
        await self.cache.close()

    def get_metrics(self, timeframe: str, stations: List[str]) -> Optional[Any]:
        return self.cache.get(METRICS, timeframe, stations)

    async def set_metrics(
        self,
        timeframe: str,
        stations: List[str],
        data: Any,
        ttl: Optional[float] = None,
    ) -> None:
        """Cache metrics and keep them as the long-lived backup snapshot."""
        await self.cache.set(METRICS, timeframe, stations, data=data, ttl=ttl)
        await self.cache.set_backup_metrics(data)

    async def get_backup_metrics(self) -> Optional[Any]:
        return await self.cache.get_backup_metrics()

    def get_comparison(self, timeframe: str, stations: List[str]) -> Optional[Any]:
        return self.cache.get(COMPARISON, timeframe, stations)

    async def set_comparison(
        self,
        timeframe: str,
        stations: List[str],
        data: Any,
        ttl: Optional[float] = None,
    ) -> None:
        await self.cache.set(COMPARISON, timeframe, stations, data=data, ttl=ttl)

    def get_forecast(self, timeframe: str, stations: List[str], *params: Any) -> Optional[Any]:
        return self.cache.get(FORECAST, timeframe, stations, *params)

    async def set_forecast(
        self,
        timeframe: str,
        stations: List[str],
        *params: Any,
        data: Any,
        ttl: Optional[float] = None,
    ) -> None:
        await self.cache.set(
            FORECAST,
            timeframe,
            stations,
            *params,
            data=data,
            ttl=self.forecast_ttl if ttl is None else ttl,
        )

    def get_chart_data(
        self, chart_type: str, timeframe: str, stations: List[str]
    ) -> Optional[Any]:
        return self.cache.get(CHART, chart_type, timeframe, stations)

    async def set_chart_data(
        self,
        chart_type: str,
        timeframe: str,
        stations: List[str],
        data: Any,
        ttl: Optional[float] = None,
    ) -> None:
        await self.cache.set(CHART, chart_type, timeframe, stations, data=data, ttl=ttl)

    def get_export_data(self, export_id: str) -> Optional[Any]:
        return self.cache.get(EXPORT, export_id)

    async def set_export_data(
        self, export_id: str, data: Any, ttl: Optional[float] = None
    ) -> None:
        await self.cache.set(
            EXPORT,
            export_id,
            data=data,
            ttl=self.export_ttl if ttl is None else ttl,
        )

    async def invalidate_metrics(
        self, timeframe: Optional[str] = None, stations: Optional[List[str]] = None
    ) -> int:
        if timeframe is not None and stations is not None:
            return await self.cache.invalidate(METRICS, timeframe, stations)
        return await self.cache.invalidate(METRICS)

    async def invalidate_comparison(
        self, timeframe: Optional[str] = None, stations: Optional[List[str]] = None
    ) -> int:
        if timeframe is not None and stations is not None:
            return await self.cache.invalidate(COMPARISON, timeframe, stations)
        return await self.cache.invalidate(COMPARISON)

    async def invalidate_forecast(self) -> int:
        return await self.cache.invalidate(FORECAST)

    async def invalidate_category(self, category: str) -> int:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown cache category: {category}")
        return await self.cache.invalidate(category)

    async def sweep(self) -> int:
        return await self.cache.sweep()

    async def clear_all(self) -> None:
        await self.cache.clear()
        logger.info("cache.cleared")

    def get_cache_stats(self) -> CacheStats:
        return self.cache.stats()
