"""
Domain Gateway - Metrics Provider

Source of the current aggregate dashboard metrics that alert thresholds
are evaluated against.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class IMetricsProvider(ABC):
    """Interface for computing the current metrics snapshot."""

    @abstractmethod
    async def fetch_metrics(self, timeframe: str, stations: List[str]) -> Dict[str, Any]:
        """
        Compute the nested metrics object for a timeframe and station set.

        Returns:
            JSON-shaped metrics, e.g. ``{"totalSales": {"current": 1200.0}}``
        """
        pass
