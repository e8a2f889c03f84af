from __future__ import annotations

import pytest

from src.domain.entities.alert import AlertOperator, AlertThreshold
from src.domain.services.formatting import describe_condition, format_metric_value


@pytest.mark.parametrize(
    "value, metric, expected",
    [
        (12.345, "profitMargin.current", "12.3%"),
        (4.0, "totalSales.changePercent", "4.0%"),
        (5000, "totalSales.current", "$5,000.00"),
        (1234.5, "expenses.total", "$1,234.50"),
        (1520.4, "fuelSales.gallonsSold", "1,520 gal"),
        (100, "visits.count", "100"),
        (2.5, "visits.count", "2.5"),
    ],
)
def test_format_metric_value(value, metric, expected) -> None:
    assert format_metric_value(value, metric) == expected


def test_describe_condition() -> None:
    threshold = AlertThreshold(
        metric="totalSales.current", threshold=5000, operator=AlertOperator.LESS_THAN
    )

    assert describe_condition(threshold) == "less than $5,000.00"
