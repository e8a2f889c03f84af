"""Infrastructure services package."""

from .background_tasks import PeriodicTask, create_alert_monitor, create_cache_sweeper

__all__ = ["PeriodicTask", "create_alert_monitor", "create_cache_sweeper"]
