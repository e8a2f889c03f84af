"""
Alert Monitoring Use Case - Application Layer

One monitoring cycle: obtain the current metrics (cache first, then the
metrics provider, then the backup snapshot), evaluate the alert
thresholds and dispatch notifications for those that fired.
"""

from typing import Any, Dict, List, Optional

import structlog
from dependency_injector.wiring import Provide, inject

from src.domain.entities.errors import DomainError
from src.domain.gateways.metrics_provider import IMetricsProvider
from src.shared.consts import ALL_STATIONS

from ..dtos.alert_dto import AlertCheckResponseDTO
from ..services.analytics_cache import AnalyticsCache
from .alert_use_cases import AlertEngine

logger = structlog.get_logger(__name__)


class AlertMonitoringUseCase:
    """Runs threshold checks against the current dashboard metrics."""

    @inject
    def __init__(
        self,
        alert_engine: AlertEngine = Provide["alert_engine"],
        analytics_cache: AnalyticsCache = Provide["analytics_cache"],
        metrics_provider: IMetricsProvider = Provide["metrics_provider"],
        timeframe: str = "today",
        stations: Optional[List[str]] = None,
    ):
        self.alert_engine = alert_engine
        self.analytics_cache = analytics_cache
        self.metrics_provider = metrics_provider
        self.timeframe = timeframe
        self.stations = list(stations or [ALL_STATIONS])

    async def load_metrics(self) -> Optional[Dict[str, Any]]:
        """Current metrics from the cache, the provider, or the backup snapshot."""
        metrics = self.analytics_cache.get_metrics(self.timeframe, self.stations)
        if metrics is not None:
            return metrics

        try:
            metrics = await self.metrics_provider.fetch_metrics(
                self.timeframe, self.stations
            )
        except DomainError as exc:
            logger.warning(
                "alerts.monitor.metrics_failed", error=exc.message, details=exc.details
            )
            return await self.analytics_cache.get_backup_metrics()

        await self.analytics_cache.set_metrics(self.timeframe, self.stations, metrics)
        return metrics

    async def check_metrics(
        self, metrics: Dict[str, Any], dispatch: bool = True
    ) -> AlertCheckResponseDTO:
        fired = await self.alert_engine.check_thresholds(metrics)
        failures = []
        if dispatch and fired:
            failures = await self.alert_engine.dispatch_alerts(fired, metrics)
        return AlertCheckResponseDTO(
            fired=[threshold.id for threshold in fired], failures=failures
        )

    async def run_cycle(self) -> AlertCheckResponseDTO:
        metrics = await self.load_metrics()
        if metrics is None:
            logger.warning("alerts.monitor.no_metrics", timeframe=self.timeframe)
            return AlertCheckResponseDTO()

        result = await self.check_metrics(metrics)
        logger.info(
            "alerts.monitor.cycle_completed",
            fired=len(result.fired),
            failures=len(result.failures),
        )
        return result
