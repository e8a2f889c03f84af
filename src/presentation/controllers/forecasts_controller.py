"""
Forecasts Router - Presentation Layer

This module defines the FastAPI router for forecast endpoints.
"""

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.application.dtos.forecast_dto import (
    ForecastReportDTO,
    ForecastRequestDTO,
    ForecastSummaryDTO,
)
from src.application.use_cases.forecast_use_case import GetForecastUseCase
from src.domain.entities.errors import InsufficientHistoryError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/forecasts", tags=["Forecasts"])


def _insufficient_data(e: InsufficientHistoryError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "error": "insufficient_data",
            "message": e.message,
            "available_days": e.available_days,
            "required_days": e.required_days,
        },
    )


@router.post("/", response_model=ForecastReportDTO)
@inject
async def create_forecast(
    request_dto: ForecastRequestDTO,
    refresh: bool = Query(False, description="Bypass the cached forecast"),
    get_forecast_use_case: GetForecastUseCase = Depends(
        Provide["get_forecast_use_case"]
    ),
) -> ForecastReportDTO:
    """
    Forecast sales, fuel, expenses and profitability for the next days.

    Reports are cached per timeframe, stations, horizon and model; pass
    ``refresh=true`` to recompute.
    """
    try:
        return await get_forecast_use_case.execute(request_dto, refresh=refresh)
    except InsufficientHistoryError as e:
        logger.warning(
            "forecasts.insufficient_history",
            available_days=e.available_days,
            required_days=e.required_days,
        )
        raise _insufficient_data(e)
    except Exception as e:
        logger.error("Failed to generate forecast", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


@router.post("/summary", response_model=ForecastSummaryDTO)
@inject
async def create_forecast_summary(
    request_dto: ForecastRequestDTO,
    refresh: bool = Query(False, description="Bypass the cached forecast"),
    get_forecast_use_case: GetForecastUseCase = Depends(
        Provide["get_forecast_use_case"]
    ),
) -> ForecastSummaryDTO:
    """Trend directions, overall confidence and recommendations for a forecast."""
    try:
        return await get_forecast_use_case.summarize(request_dto, refresh=refresh)
    except InsufficientHistoryError as e:
        raise _insufficient_data(e)
    except Exception as e:
        logger.error("Failed to summarize forecast", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
