"""Domain entities for forecast results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class ForecastModel(str, Enum):
    """Selectable estimation models."""

    LINEAR = "linear"
    MOVING_AVERAGE = "moving_average"
    EXPONENTIAL_SMOOTHING = "exponential_smoothing"
    SEASONAL = "seasonal"


class TrendDirection(str, Enum):
    """Direction of a forecast series between its first and last point."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(slots=True)
class ForecastResult:
    """Prediction for one future day with its confidence band."""

    date: date
    predicted: float
    confidence: float
    upper_bound: float
    lower_bound: float
