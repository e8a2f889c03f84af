"""
Forecast DTOs - Application Layer

Data Transfer Objects for forecast requests, the multi-family forecast
report and its summary.
"""

from datetime import date, datetime
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from src.domain.entities.forecast import ForecastModel, ForecastResult, TrendDirection
from src.shared.consts import ALL_STATIONS


class ForecastRequestDTO(BaseModel):
    """Parameters of a forecast request."""

    timeframe: str = Field(
        default="month", description="Dashboard timeframe the forecast belongs to"
    )
    stations: List[str] = Field(
        default_factory=lambda: [ALL_STATIONS],
        description="Stations to include; empty or 'ALL' means every station",
    )
    forecast_days: int = Field(
        default=7, ge=1, le=90, description="Number of future days to predict"
    )
    model: ForecastModel = Field(
        default=ForecastModel.EXPONENTIAL_SMOOTHING,
        description="Estimation model",
    )

    @field_validator("stations")
    @classmethod
    def strip_station_names(cls, v: List[str]) -> List[str]:
        return [station.strip() for station in v if station and station.strip()]

    @property
    def station_filter(self) -> List[str]:
        """Stations to filter on; empty when every station is requested."""
        if not self.stations or ALL_STATIONS in self.stations:
            return []
        return list(self.stations)

    model_config = {
        "json_schema_extra": {
            "example": {
                "timeframe": "month",
                "stations": ["MOBIL", "AMOCO ROSEDALE"],
                "forecast_days": 7,
                "model": "seasonal",
            }
        }
    }


class ForecastPointDTO(BaseModel):
    """Forecast of a single-valued series for one day."""

    date: date
    predicted: float = Field(ge=0)
    confidence: float = Field(ge=0, le=1)
    upper_bound: float = Field(ge=0)
    lower_bound: float = Field(ge=0)

    @classmethod
    def from_result(cls, result: ForecastResult) -> "ForecastPointDTO":
        return cls(
            date=result.date,
            predicted=result.predicted,
            confidence=result.confidence,
            upper_bound=result.upper_bound,
            lower_bound=result.lower_bound,
        )


class FuelForecastPointDTO(BaseModel):
    """Fuel volume and revenue forecast for one day."""

    date: date
    gallons: float
    revenue: float
    confidence: float


class ExpenseForecastPointDTO(BaseModel):
    """Total expenses forecast with its per-category breakdown for one day."""

    date: date
    amount: float
    confidence: float
    by_category: Dict[str, float] = Field(default_factory=dict)


class ProfitabilityForecastPointDTO(BaseModel):
    """Profit amount and margin (percent) forecast for one day."""

    date: date
    profit: float
    margin: float
    confidence: float


class ForecastMetadataDTO(BaseModel):
    model: ForecastModel
    historical_days: int
    forecast_days: int
    generated_at: datetime
    confidence: float = Field(
        description="Mean confidence of the sales forecast over the horizon"
    )


class ForecastReportDTO(BaseModel):
    """Complete forecast for the four metric families."""

    sales: List[ForecastPointDTO]
    fuel: List[FuelForecastPointDTO]
    expenses: List[ExpenseForecastPointDTO]
    profitability: List[ProfitabilityForecastPointDTO]
    metadata: ForecastMetadataDTO


class ForecastSummaryDTO(BaseModel):
    """Trend digest and recommendations derived from a forecast report."""

    sales_trend: TrendDirection
    fuel_trend: TrendDirection
    expenses_trend: TrendDirection
    profitability_trend: TrendDirection
    overall_confidence: float
    recommendations: List[str] = Field(default_factory=list)
