from __future__ import annotations

import pytest

from src.domain.entities.forecast import TrendDirection
from src.domain.services.trend_analysis import analyze_trend


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], TrendDirection.INSUFFICIENT_DATA),
        ([10.0], TrendDirection.INSUFFICIENT_DATA),
        ([100.0, 120.0], TrendDirection.INCREASING),
        ([100.0, 80.0], TrendDirection.DECREASING),
        ([100.0, 104.0], TrendDirection.STABLE),
        ([100.0, 95.0], TrendDirection.STABLE),
        ([0.0, 5.0], TrendDirection.INCREASING),
        ([0.0, -5.0], TrendDirection.DECREASING),
        ([0.0, 0.0], TrendDirection.STABLE),
    ],
)
def test_analyze_trend(values, expected) -> None:
    assert analyze_trend(values) is expected
