"""Domain service helpers for describing the direction of forecast series."""

from typing import Sequence

from src.domain.entities.forecast import TrendDirection

TREND_CHANGE_PERCENT = 5.0


def analyze_trend(values: Sequence[float]) -> TrendDirection:
    """Classify the change between the first and last predicted value."""
    if len(values) < 2:
        return TrendDirection.INSUFFICIENT_DATA

    first, last = values[0], values[-1]
    if first == 0:
        if last > 0:
            return TrendDirection.INCREASING
        if last < 0:
            return TrendDirection.DECREASING
        return TrendDirection.STABLE

    change = (last - first) / abs(first) * 100
    if change > TREND_CHANGE_PERCENT:
        return TrendDirection.INCREASING
    if change < -TREND_CHANGE_PERCENT:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE
