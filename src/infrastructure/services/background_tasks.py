"""Recurring asyncio tasks: cache sweeping and alert monitoring."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from src.application.services.analytics_cache import AnalyticsCache
from src.application.use_cases.alert_monitoring_use_case import AlertMonitoringUseCase

logger = structlog.get_logger(__name__)

_DEFAULT_SWEEP_INTERVAL = 60
_DEFAULT_MONITOR_INTERVAL = 60


class PeriodicTask:
    """Runs a coroutine every ``interval`` seconds on the running event loop."""

    def __init__(
        self,
        name: str,
        action: Callable[[], Awaitable[object]],
        interval: float,
        enabled: bool = True,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.action = action
        self.interval = interval
        self.enabled = enabled
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if not self.enabled or self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info("task.started", task=self.name, interval=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("task.stopped", task=self.name)

    async def run_once(self) -> None:
        """Run the action a single time, logging instead of raising on failure."""
        try:
            await self.action()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error("task.failed", task=self.name, error=str(exc), exc_info=exc)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.run_once()


def create_cache_sweeper(
    analytics_cache: AnalyticsCache, interval: float = _DEFAULT_SWEEP_INTERVAL
) -> PeriodicTask:
    return PeriodicTask("cache_sweeper", analytics_cache.sweep, interval)


def create_alert_monitor(
    monitoring_use_case: AlertMonitoringUseCase,
    interval: float = _DEFAULT_MONITOR_INTERVAL,
    enabled: bool = True,
) -> PeriodicTask:
    return PeriodicTask(
        "alert_monitor", monitoring_use_case.run_cycle, interval, enabled=enabled
    )
