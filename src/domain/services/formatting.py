"""Display formatting of metric values in alert messages."""

from src.domain.entities.alert import AlertThreshold

_PERCENT_MARKERS = ("margin", "percent")
_CURRENCY_MARKERS = ("sales", "revenue", "expense", "profit")
_GALLON_MARKERS = ("gallon",)


def format_metric_value(value: float, metric: str) -> str:
    """
    Format a value according to what the metric path names.

    Percentages and volumes win over currency so ``profitMargin.current``
    renders as a margin and ``fuelSales.gallonsSold`` as gallons.
    """
    name = metric.lower()
    if any(marker in name for marker in _PERCENT_MARKERS):
        return f"{value:.1f}%"
    if any(marker in name for marker in _GALLON_MARKERS):
        return f"{value:,.0f} gal"
    if any(marker in name for marker in _CURRENCY_MARKERS):
        return f"${value:,.2f}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def describe_condition(threshold: AlertThreshold) -> str:
    """``less than $5,000.00`` style rendering of a threshold condition."""
    return (
        f"{threshold.operator.label} "
        f"{format_metric_value(threshold.threshold, threshold.metric)}"
    )
