"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .alerts_controller import router as alerts_router
from .cache_controller import router as cache_router
from .forecasts_controller import router as forecasts_router
from .system_controller import router as system_router

__all__ = ["alerts_router", "cache_router", "forecasts_router", "system_router"]
