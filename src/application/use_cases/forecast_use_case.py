"""
Forecast Use Cases - Application Layer

This module contains the forecast engine, which turns the daily sales
report history into per-metric daily series and projects them forward
with the selected estimator, and the cached entry point used by the API.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Callable, List

import pandas as pd
import structlog
from dependency_injector.wiring import Provide, inject

from src.domain.entities.errors import InsufficientHistoryError, RecordStoreError
from src.domain.entities.forecast import ForecastResult, TrendDirection
from src.domain.entities.records import EXPENSE_CATEGORY_SHARES, DailyRecord
from src.domain.entities.time_series import DataPoint
from src.domain.gateways.record_store_gateway import IRecordStoreGateway, RecordFilter
from src.domain.services.estimators import apply_model, overall_confidence
from src.domain.services.trend_analysis import analyze_trend

from ..dtos.forecast_dto import (
    ExpenseForecastPointDTO,
    ForecastMetadataDTO,
    ForecastPointDTO,
    ForecastReportDTO,
    ForecastRequestDTO,
    ForecastSummaryDTO,
    FuelForecastPointDTO,
    ProfitabilityForecastPointDTO,
)
from ..services.analytics_cache import AnalyticsCache

logger = structlog.get_logger(__name__)

SALES_REPORTS_TABLE_ID = 12356
LOOKBACK_DAYS = 90
MIN_HISTORY_DAYS = 7
PAGE_SIZE = 1000

# Share of total sales attributed to fuel
FUEL_REVENUE_SHARE = 0.6
# Profit assumed for reports whose expense breakdown cannot be decoded
ESTIMATED_PROFIT_MARGIN = 0.2
LOW_CONFIDENCE_THRESHOLD = 0.5


def build_daily_frame(records: List[DailyRecord]) -> pd.DataFrame:
    """
    Aggregate records into one row per calendar day.

    Columns: sales, gallons, expenses, profit, revenue, margin. Days with no
    report are absent rather than zero-filled.
    """
    rows = [
        {
            "date": record.report_date,
            "sales": record.total_sales,
            "gallons": record.total_gallons,
            "expenses": record.expenses_total,
            "profit": (
                record.total_sales - record.expenses_total
                if record.has_breakdown
                else record.total_sales * ESTIMATED_PROFIT_MARGIN
            ),
        }
        for record in records
    ]
    columns = ["date", "sales", "gallons", "expenses", "profit"]
    daily = pd.DataFrame(rows, columns=columns).groupby("date", sort=True).sum()

    daily["revenue"] = daily["sales"] * FUEL_REVENUE_SHARE
    positive_sales = daily["sales"].where(daily["sales"] > 0)
    daily["margin"] = (daily["profit"] / positive_sales * 100).fillna(0.0)
    return daily


def to_series(daily: pd.DataFrame, column: str, scale: float = 1.0) -> List[DataPoint]:
    return [
        DataPoint(date=day, value=float(value) * scale)
        for day, value in daily[column].items()
    ]


class ForecastEngine:
    """Multi-metric forecasting over the daily sales report history."""

    @inject
    def __init__(
        self,
        record_store: IRecordStoreGateway = Provide["record_store_gateway"],
        sales_table_id: int = SALES_REPORTS_TABLE_ID,
        lookback_days: int = LOOKBACK_DAYS,
        min_history_days: int = MIN_HISTORY_DAYS,
        page_size: int = PAGE_SIZE,
        today: Callable[[], date] = date.today,
    ):
        self.record_store = record_store
        self.sales_table_id = sales_table_id
        self.lookback_days = lookback_days
        self.min_history_days = min_history_days
        self.page_size = page_size
        self._today = today

    async def generate_forecast(self, request: ForecastRequestDTO) -> ForecastReportDTO:
        """
        Forecast sales, fuel, expenses and profitability.

        Args:
            request: Timeframe, stations, horizon and model

        Returns:
            The four forecast families with metadata

        Raises:
            InsufficientHistoryError: When the lookback window holds fewer
                distinct days than ``min_history_days``
        """
        logger.info(
            "forecast.started",
            timeframe=request.timeframe,
            stations=request.stations,
            forecast_days=request.forecast_days,
            model=request.model.value,
        )

        records = await self._fetch_history(request.station_filter)
        historical_days = len({record.report_date for record in records})
        if historical_days < self.min_history_days:
            logger.warning(
                "forecast.insufficient_history",
                available_days=historical_days,
                required_days=self.min_history_days,
            )
            raise InsufficientHistoryError(
                available_days=historical_days,
                required_days=self.min_history_days,
                details={"timeframe": request.timeframe, "stations": request.stations},
            )

        daily = build_daily_frame(records)
        days = request.forecast_days
        model = request.model

        def project(column: str, scale: float = 1.0) -> List[ForecastResult]:
            return apply_model(to_series(daily, column, scale), days, model, column)

        sales = project("sales")
        gallons = project("gallons")
        revenue = project("revenue")
        expenses = project("expenses")
        categories = {
            name: apply_model(to_series(daily, "expenses", share), days, model, name)
            for name, share in EXPENSE_CATEGORY_SHARES.items()
        }
        profit = project("profit")
        margin = project("margin")

        report = ForecastReportDTO(
            sales=[ForecastPointDTO.from_result(item) for item in sales],
            fuel=[
                FuelForecastPointDTO(
                    date=g.date,
                    gallons=g.predicted,
                    revenue=r.predicted,
                    confidence=min(g.confidence, r.confidence),
                )
                for g, r in zip(gallons, revenue)
            ],
            expenses=[
                ExpenseForecastPointDTO(
                    date=item.date,
                    amount=item.predicted,
                    confidence=item.confidence,
                    by_category={
                        name: forecast[index].predicted
                        for name, forecast in categories.items()
                    },
                )
                for index, item in enumerate(expenses)
            ],
            profitability=[
                ProfitabilityForecastPointDTO(
                    date=p.date,
                    profit=p.predicted,
                    margin=m.predicted,
                    confidence=min(p.confidence, m.confidence),
                )
                for p, m in zip(profit, margin)
            ],
            metadata=ForecastMetadataDTO(
                model=model,
                historical_days=historical_days,
                forecast_days=days,
                generated_at=datetime.now(timezone.utc),
                confidence=overall_confidence(sales),
            ),
        )

        logger.info(
            "forecast.completed",
            historical_days=historical_days,
            forecast_days=days,
            confidence=report.metadata.confidence,
        )
        return report

    def generate_forecast_summary(self, report: ForecastReportDTO) -> ForecastSummaryDTO:
        """Classify the trend of each family and derive recommendations."""
        sales_trend = analyze_trend([item.predicted for item in report.sales])
        fuel_trend = analyze_trend([item.revenue for item in report.fuel])
        expenses_trend = analyze_trend([item.amount for item in report.expenses])
        profit_trend = analyze_trend([item.profit for item in report.profitability])

        recommendations: List[str] = []
        if sales_trend == TrendDirection.DECREASING:
            recommendations.append("Consider marketing campaigns to boost sales")
        if expenses_trend == TrendDirection.INCREASING:
            recommendations.append(
                "Review expense categories for potential cost savings"
            )
        if profit_trend == TrendDirection.DECREASING:
            recommendations.append(
                "Focus on improving profit margins through pricing or cost optimization"
            )
        if report.metadata.confidence < LOW_CONFIDENCE_THRESHOLD:
            recommendations.append(
                "Forecast confidence is low, consider collecting more historical data"
            )

        return ForecastSummaryDTO(
            sales_trend=sales_trend,
            fuel_trend=fuel_trend,
            expenses_trend=expenses_trend,
            profitability_trend=profit_trend,
            overall_confidence=report.metadata.confidence,
            recommendations=recommendations,
        )

    async def _fetch_history(self, stations: List[str]) -> List[DailyRecord]:
        """
        Load the lookback window of reports, one query per station.

        A failing record store is logged and yields no history.
        """
        end = self._today()
        start = end - timedelta(days=self.lookback_days)
        date_range = [
            RecordFilter("report_date", "GreaterThanOrEqual", start.isoformat()),
            RecordFilter("report_date", "LessThanOrEqual", end.isoformat()),
        ]
        filter_sets = [
            date_range + [RecordFilter("station", "Equal", station)]
            for station in stations
        ] or [date_range]

        raw: List[dict] = []
        try:
            for filters in filter_sets:
                raw.extend(
                    await self.record_store.query_all(
                        self.sales_table_id,
                        page_size=self.page_size,
                        order_by="report_date",
                        is_asc=True,
                        filters=filters,
                    )
                )
        except RecordStoreError as exc:
            logger.error(
                "forecast.history.fetch_failed", error=exc.message, details=exc.details
            )
            return []

        records = [DailyRecord.from_record(item) for item in raw]
        return [record for record in records if record is not None]


class GetForecastUseCase:
    """Forecast entry point that memoizes reports in the analytics cache."""

    @inject
    def __init__(
        self,
        forecast_engine: ForecastEngine = Provide["forecast_engine"],
        analytics_cache: AnalyticsCache = Provide["analytics_cache"],
    ):
        self.forecast_engine = forecast_engine
        self.analytics_cache = analytics_cache

    async def execute(
        self, request: ForecastRequestDTO, refresh: bool = False
    ) -> ForecastReportDTO:
        params = (request.forecast_days, request.model.value)
        if not refresh:
            cached = self.analytics_cache.get_forecast(
                request.timeframe, request.stations, *params
            )
            if cached is not None:
                logger.debug("forecast.cache.hit", timeframe=request.timeframe)
                return ForecastReportDTO.model_validate(cached)

        report = await self.forecast_engine.generate_forecast(request)
        await self.analytics_cache.set_forecast(
            request.timeframe,
            request.stations,
            *params,
            data=report.model_dump(mode="json"),
        )
        return report

    async def summarize(
        self, request: ForecastRequestDTO, refresh: bool = False
    ) -> ForecastSummaryDTO:
        report = await self.execute(request, refresh=refresh)
        return self.forecast_engine.generate_forecast_summary(report)
