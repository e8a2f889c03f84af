"""
Infrastructure Gateway - Sales Metrics Provider

Computes the dashboard metrics snapshot (sales, fuel, expenses, profit
margin) for a timeframe from the daily sales reports in the record store.
"""

from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Tuple

import structlog

from src.domain.entities.records import EXPENSE_CATEGORY_SHARES, DailyRecord
from src.domain.gateways.metrics_provider import IMetricsProvider
from src.domain.gateways.record_store_gateway import IRecordStoreGateway, RecordFilter
from src.shared.consts import ALL_STATIONS

logger = structlog.get_logger(__name__)

DateRange = Tuple[date, date]

# Used until per-grade pricing is available in the reports
ESTIMATED_PRICE_PER_GALLON = 3.50
TARGET_PROFIT_MARGIN = 25.0


def _quarter_start(day: date) -> date:
    return date(day.year, 3 * ((day.month - 1) // 3) + 1, 1)


def resolve_timeframe(timeframe: str, today: date) -> Tuple[DateRange, DateRange]:
    """
    Return the (current, previous) inclusive date ranges of a timeframe.

    Supported: today, yesterday, week (ISO week to date), month, quarter and
    year (period to date). Unknown timeframes resolve like ``today``.
    """
    if timeframe == "yesterday":
        day = today - timedelta(days=1)
        return (day, day), (day - timedelta(days=1), day - timedelta(days=1))

    if timeframe == "week":
        start = today - timedelta(days=today.weekday())
        return (start, today), (start - timedelta(days=7), start - timedelta(days=1))

    if timeframe == "month":
        start = today.replace(day=1)
        previous_end = start - timedelta(days=1)
        return (start, today), (previous_end.replace(day=1), previous_end)

    if timeframe == "quarter":
        start = _quarter_start(today)
        previous_end = start - timedelta(days=1)
        return (start, today), (_quarter_start(previous_end), previous_end)

    if timeframe == "year":
        start = date(today.year, 1, 1)
        return (start, today), (date(today.year - 1, 1, 1), start - timedelta(days=1))

    return (today, today), (today - timedelta(days=1), today - timedelta(days=1))


class SalesMetricsProvider(IMetricsProvider):
    """Metrics provider backed by the daily sales reports table."""

    def __init__(
        self,
        record_store: IRecordStoreGateway,
        table_id: int,
        page_size: int = 1000,
        today: Callable[[], date] = date.today,
    ):
        self.record_store = record_store
        self.table_id = table_id
        self.page_size = page_size
        self._today = today

    async def fetch_metrics(self, timeframe: str, stations: List[str]) -> Dict[str, Any]:
        """
        Compute the metrics snapshot.

        Raises:
            RecordStoreError: When the reports cannot be read
        """
        current_range, previous_range = resolve_timeframe(timeframe, self._today())
        current = await self._fetch(current_range, stations)
        previous = await self._fetch(previous_range, stations)

        sales = sum(record.total_sales for record in current)
        previous_sales = sum(record.total_sales for record in previous)
        gallons = sum(record.total_gallons for record in current)
        previous_gallons = sum(record.total_gallons for record in previous)
        expenses = sum(record.expenses_total for record in current)
        previous_expenses = sum(record.expenses_total for record in previous)

        fuel_revenue = gallons * ESTIMATED_PRICE_PER_GALLON
        margin = (sales - expenses) / sales * 100 if sales > 0 else 0.0

        logger.debug(
            "metrics.computed",
            timeframe=timeframe,
            current_records=len(current),
            previous_records=len(previous),
        )
        return {
            "totalSales": {
                "current": sales,
                "previous": previous_sales,
                "change": sales - previous_sales,
                "changePercent": (
                    (sales - previous_sales) / previous_sales * 100
                    if previous_sales > 0
                    else 0.0
                ),
            },
            "fuelSales": {
                "current": fuel_revenue,
                "gallonsSold": gallons,
                "avgPricePerGallon": fuel_revenue / gallons if gallons > 0 else 0.0,
                "change": fuel_revenue - previous_gallons * ESTIMATED_PRICE_PER_GALLON,
            },
            "expenses": {
                "total": expenses,
                "byCategory": [
                    {"category": name, "amount": expenses * share}
                    for name, share in EXPENSE_CATEGORY_SHARES.items()
                ],
                "change": expenses - previous_expenses,
            },
            "profitMargin": {
                "current": margin,
                "target": TARGET_PROFIT_MARGIN,
                "variance": margin - TARGET_PROFIT_MARGIN,
            },
        }

    async def _fetch(self, date_range: DateRange, stations: List[str]) -> List[DailyRecord]:
        start, end = date_range
        base = [
            RecordFilter("report_date", "GreaterThanOrEqual", start.isoformat()),
            RecordFilter("report_date", "LessThanOrEqual", end.isoformat()),
        ]
        selected = [s for s in stations if s and s != ALL_STATIONS]
        if ALL_STATIONS in stations:
            selected = []
        filter_sets = [
            base + [RecordFilter("station", "Equal", station)] for station in selected
        ] or [base]

        rows: List[Dict[str, Any]] = []
        for filters in filter_sets:
            rows.extend(
                await self.record_store.query_all(
                    self.table_id,
                    page_size=self.page_size,
                    order_by="report_date",
                    filters=filters,
                )
            )

        records = [DailyRecord.from_record(row) for row in rows]
        return [record for record in records if record is not None]
