"""
Domain Service - Forecast Estimators

Short-horizon estimators applied to a single aggregated daily series.
Every estimator returns one ``ForecastResult`` per future day, dated
consecutively after the last observation, with confidence decaying
geometrically with the horizon and values floored at zero.

Series shorter than an estimator's minimum degrade to a flat-mean
fallback; ``apply_model`` additionally turns any computation failure into
the fallback so a single bad series never fails a whole forecast.
"""

import math
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import structlog

from src.domain.entities.forecast import ForecastModel, ForecastResult
from src.domain.entities.time_series import DataPoint, SeasonalPattern

logger = structlog.get_logger(__name__)

MIN_CONFIDENCE = 0.1

LINEAR_DECAY = 0.05
LINEAR_SPREAD = 0.5
LINEAR_CONFIDENCE_RANGE = (0.3, 0.9)

MOVING_AVERAGE_WINDOW = 7
MOVING_AVERAGE_DECAY = 0.03
MOVING_AVERAGE_SPREAD = 0.3
MOVING_AVERAGE_CONFIDENCE_RANGE = (0.3, 0.8)

SMOOTHING_ALPHA = 0.3
SMOOTHING_DECAY = 0.04
SMOOTHING_SPREAD = 0.4
SMOOTHING_CONFIDENCE_RANGE = (0.2, 0.85)

SEASONAL_MIN_POINTS = 14

FALLBACK_BASE_CONFIDENCE = 0.5
FALLBACK_DECAY = 0.1
FALLBACK_SPREAD = 0.3


def _clamp(value: float, bounds: Sequence[float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def decayed_confidence(base: float, decay: float, step: int) -> float:
    """Confidence for the ``step``-th future day (1-indexed)."""
    return max(MIN_CONFIDENCE, base * math.exp(-decay * step))


def _forecast_point(
    day: date, predicted: float, confidence: float, spread: float
) -> ForecastResult:
    margin = abs(predicted) * (1 - confidence) * spread
    return ForecastResult(
        date=day,
        predicted=max(0.0, predicted),
        confidence=confidence,
        upper_bound=max(0.0, predicted + margin),
        lower_bound=max(0.0, predicted - margin),
    )


def _next_day(data: Sequence[DataPoint], step: int) -> date:
    last = data[-1].date if data else date.today()
    return last + timedelta(days=step)


def _values(data: Sequence[DataPoint]) -> np.ndarray:
    return np.asarray([point.value for point in data], dtype=float)


def fallback_forecast(
    data: Sequence[DataPoint], forecast_days: int
) -> List[ForecastResult]:
    """Flat-mean forecast with a wide fixed band, used when data is too short."""
    average = float(_values(data).mean()) if data else 0.0
    margin = abs(average) * FALLBACK_SPREAD

    results: List[ForecastResult] = []
    for step in range(1, forecast_days + 1):
        results.append(
            ForecastResult(
                date=_next_day(data, step),
                predicted=max(0.0, average),
                confidence=decayed_confidence(
                    FALLBACK_BASE_CONFIDENCE, FALLBACK_DECAY, step
                ),
                upper_bound=max(0.0, average + margin),
                lower_bound=max(0.0, average - margin),
            )
        )
    return results


def linear_regression(
    data: Sequence[DataPoint], forecast_days: int
) -> List[ForecastResult]:
    """Ordinary least squares of value against day index."""
    if len(data) < 2:
        return fallback_forecast(data, forecast_days)

    y = _values(data)
    n = len(y)
    x = np.arange(n, dtype=float)

    denominator = n * float((x * x).sum()) - float(x.sum()) ** 2
    slope = (n * float((x * y).sum()) - float(x.sum()) * float(y.sum())) / denominator
    intercept = (float(y.sum()) - slope * float(x.sum())) / n

    total_variation = float(((y - y.mean()) ** 2).sum())
    residual_variation = float(((y - (slope * x + intercept)) ** 2).sum())
    r_squared = 1.0 if total_variation == 0 else 1 - residual_variation / total_variation
    base_confidence = _clamp(r_squared, LINEAR_CONFIDENCE_RANGE)

    return [
        _forecast_point(
            _next_day(data, step),
            slope * (n + step - 1) + intercept,
            decayed_confidence(base_confidence, LINEAR_DECAY, step),
            LINEAR_SPREAD,
        )
        for step in range(1, forecast_days + 1)
    ]


def moving_average(
    data: Sequence[DataPoint],
    forecast_days: int,
    window: int = MOVING_AVERAGE_WINDOW,
) -> List[ForecastResult]:
    """Mean of the trailing window, held flat across the horizon."""
    if len(data) < window:
        return fallback_forecast(data, forecast_days)

    recent = _values(data)[-window:]
    average = float(recent.mean())
    variance = float(recent.var())

    if average == 0:
        base_confidence = MOVING_AVERAGE_CONFIDENCE_RANGE[0]
    else:
        base_confidence = _clamp(
            1 / (1 + variance / (average * average)), MOVING_AVERAGE_CONFIDENCE_RANGE
        )

    return [
        _forecast_point(
            _next_day(data, step),
            average,
            decayed_confidence(base_confidence, MOVING_AVERAGE_DECAY, step),
            MOVING_AVERAGE_SPREAD,
        )
        for step in range(1, forecast_days + 1)
    ]


def exponential_smoothing(
    data: Sequence[DataPoint],
    forecast_days: int,
    alpha: float = SMOOTHING_ALPHA,
) -> List[ForecastResult]:
    """Single exponential smoothing over the whole history."""
    if len(data) < 2:
        return fallback_forecast(data, forecast_days)

    values = _values(data)
    smoothed = float(values[0])
    errors: List[float] = []
    for value in values[1:]:
        errors.append(abs(float(value) - smoothed))
        smoothed = alpha * float(value) + (1 - alpha) * smoothed

    average_error = float(np.mean(errors))
    average_value = float(values.mean())
    if average_value > 0:
        raw_confidence = 1 - average_error / average_value
    else:
        raw_confidence = 1.0 if average_error == 0 else 0.0
    base_confidence = _clamp(raw_confidence, SMOOTHING_CONFIDENCE_RANGE)

    return [
        _forecast_point(
            _next_day(data, step),
            smoothed,
            decayed_confidence(base_confidence, SMOOTHING_DECAY, step),
            SMOOTHING_SPREAD,
        )
        for step in range(1, forecast_days + 1)
    ]


def detect_seasonality(data: Sequence[DataPoint]) -> SeasonalPattern:
    """Weekday factors: mean of each weekday divided by the overall mean."""
    pattern = SeasonalPattern()
    if not data:
        return pattern

    overall = float(_values(data).mean())
    totals = [0.0] * 7
    counts = [0] * 7
    for point in data:
        weekday = point.date.weekday()
        totals[weekday] += point.value
        counts[weekday] += 1

    for weekday in range(7):
        if counts[weekday] and overall > 0:
            pattern.weekly[weekday] = (totals[weekday] / counts[weekday]) / overall
    return pattern


def deseasonalize(
    data: Sequence[DataPoint], pattern: SeasonalPattern
) -> List[DataPoint]:
    result = []
    for point in data:
        factor = pattern.factor_for(point.date)
        value = point.value / factor if factor > 0 else point.value
        result.append(DataPoint(date=point.date, value=value))
    return result


def seasonal_decomposition(
    data: Sequence[DataPoint], forecast_days: int
) -> List[ForecastResult]:
    """Exponential smoothing of the weekday-adjusted series, re-seasonalised."""
    if len(data) < SEASONAL_MIN_POINTS:
        return exponential_smoothing(data, forecast_days)

    pattern = detect_seasonality(data)
    base = exponential_smoothing(deseasonalize(data, pattern), forecast_days)

    results = []
    for item in base:
        factor = pattern.factor_for(item.date)
        results.append(
            ForecastResult(
                date=item.date,
                predicted=max(0.0, item.predicted * factor),
                confidence=item.confidence,
                upper_bound=max(0.0, item.upper_bound * factor),
                lower_bound=max(0.0, item.lower_bound * factor),
            )
        )
    return results


_ESTIMATORS: Dict[ForecastModel, Callable[[Sequence[DataPoint], int], List[ForecastResult]]] = {
    ForecastModel.LINEAR: linear_regression,
    ForecastModel.MOVING_AVERAGE: moving_average,
    ForecastModel.EXPONENTIAL_SMOOTHING: exponential_smoothing,
    ForecastModel.SEASONAL: seasonal_decomposition,
}


def apply_model(
    data: Sequence[DataPoint],
    forecast_days: int,
    model: ForecastModel = ForecastModel.EXPONENTIAL_SMOOTHING,
    series_name: Optional[str] = None,
) -> List[ForecastResult]:
    """
    Forecast a series with the selected model.

    Args:
        data: Daily observations (any order)
        forecast_days: Number of future days to produce
        model: Estimation model
        series_name: Label used in logs

    Returns:
        ``forecast_days`` results; never raises for bad data.
    """
    ordered = sorted(data, key=lambda point: point.date)
    estimator = _ESTIMATORS.get(model, exponential_smoothing)
    try:
        return estimator(ordered, forecast_days)
    except Exception as exc:
        logger.warning(
            "forecast.estimator.failed",
            model=getattr(model, "value", model),
            series=series_name,
            points=len(ordered),
            error=str(exc),
        )
        return fallback_forecast(ordered, forecast_days)


def overall_confidence(results: Sequence[ForecastResult]) -> float:
    if not results:
        return 0.0
    return float(np.mean([item.confidence for item in results]))
