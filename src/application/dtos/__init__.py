"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .alert_dto import (
    AlertCheckRequestDTO,
    AlertCheckResponseDTO,
    AlertNotificationDTO,
    AlertTestRequestDTO,
    AlertThresholdCreateDTO,
    AlertThresholdResponseDTO,
    AlertThresholdUpdateDTO,
    DispatchFailureDTO,
)
from .cache_dto import CacheStatsDTO
from .forecast_dto import (
    ExpenseForecastPointDTO,
    ForecastMetadataDTO,
    ForecastPointDTO,
    ForecastReportDTO,
    ForecastRequestDTO,
    ForecastSummaryDTO,
    FuelForecastPointDTO,
    ProfitabilityForecastPointDTO,
)

__all__ = [
    "AlertCheckRequestDTO",
    "AlertCheckResponseDTO",
    "AlertNotificationDTO",
    "AlertTestRequestDTO",
    "AlertThresholdCreateDTO",
    "AlertThresholdResponseDTO",
    "AlertThresholdUpdateDTO",
    "DispatchFailureDTO",
    "CacheStatsDTO",
    "ExpenseForecastPointDTO",
    "ForecastMetadataDTO",
    "ForecastPointDTO",
    "ForecastReportDTO",
    "ForecastRequestDTO",
    "ForecastSummaryDTO",
    "FuelForecastPointDTO",
    "ProfitabilityForecastPointDTO",
]
