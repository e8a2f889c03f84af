"""Cache endpoints exposing statistics and invalidation."""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from src.application.dtos.cache_dto import CacheStatsDTO
from src.application.use_cases.cache_use_cases import CacheManagementUseCase
from src.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cache", tags=["Cache"])


@router.get("/stats", response_model=CacheStatsDTO)
@inject
async def get_cache_stats(
    cache_management_use_case: CacheManagementUseCase = Depends(
        Provide["cache_management_use_case"]
    ),
) -> CacheStatsDTO:
    """Return entry count, hit/miss counters and the hit rate."""
    return cache_management_use_case.get_stats()


@router.delete("/")
@inject
async def clear_cache(
    cache_management_use_case: CacheManagementUseCase = Depends(
        Provide["cache_management_use_case"]
    ),
) -> dict:
    removed = await cache_management_use_case.invalidate()
    logger.info("cache.cleared", removed=removed)
    return {"removed": removed}


@router.delete("/{category}")
@inject
async def invalidate_cache_category(
    category: str,
    cache_management_use_case: CacheManagementUseCase = Depends(
        Provide["cache_management_use_case"]
    ),
) -> dict:
    """Drop every cached entry of one category (metrics, forecast, ...)."""
    try:
        removed = await cache_management_use_case.invalidate(category)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    logger.info("cache.category.invalidated", category=category, removed=removed)
    return {"category": category, "removed": removed}
