"""Domain entities for aggregated daily time series."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List


@dataclass(slots=True)
class DataPoint:
    """One aggregated observation of a metric for a calendar day."""

    date: date
    value: float


@dataclass(slots=True)
class SeasonalPattern:
    """Multiplicative weekday factors relative to the series mean (Monday first)."""

    weekly: List[float] = field(default_factory=lambda: [1.0] * 7)

    def factor_for(self, day: date) -> float:
        return self.weekly[day.weekday()]
