from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from src.application.dtos.forecast_dto import ForecastPointDTO, ForecastRequestDTO
from src.domain.entities.forecast import ForecastModel, ForecastResult


def test_request_defaults() -> None:
    request = ForecastRequestDTO()

    assert request.timeframe == "month"
    assert request.forecast_days == 7
    assert request.model is ForecastModel.EXPONENTIAL_SMOOTHING
    assert request.station_filter == []


@pytest.mark.parametrize(
    "stations, expected",
    [
        ([], []),
        (["ALL"], []),
        (["North", "ALL"], []),
        ([" North ", "", "South"], ["North", "South"]),
    ],
)
def test_station_filter(stations, expected) -> None:
    assert ForecastRequestDTO(stations=stations).station_filter == expected


@pytest.mark.parametrize("forecast_days", [0, 91])
def test_forecast_days_bounds(forecast_days) -> None:
    with pytest.raises(ValidationError):
        ForecastRequestDTO(forecast_days=forecast_days)


def test_unknown_model_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ForecastRequestDTO(model="arima")


def test_point_from_result() -> None:
    result = ForecastResult(
        date=date(2024, 7, 1),
        predicted=120.0,
        confidence=0.8,
        upper_bound=140.0,
        lower_bound=100.0,
    )

    point = ForecastPointDTO.from_result(result)

    assert point.model_dump() == {
        "date": date(2024, 7, 1),
        "predicted": 120.0,
        "confidence": 0.8,
        "upper_bound": 140.0,
        "lower_bound": 100.0,
    }
