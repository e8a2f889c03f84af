from __future__ import annotations

import pytest
from fastapi import HTTPException

from src.application.services.analytics_cache import AnalyticsCache
from src.application.services.result_cache import ResultCache
from src.application.use_cases.cache_use_cases import CacheManagementUseCase
from src.presentation.controllers import cache_controller


@pytest.fixture()
def use_case(memory_store, fake_clock) -> CacheManagementUseCase:
    cache = AnalyticsCache(ResultCache(memory_store, clock=fake_clock))
    return CacheManagementUseCase(analytics_cache=cache)


@pytest.mark.asyncio
async def test_get_cache_stats(use_case) -> None:
    await use_case.analytics_cache.set_metrics("today", ["ALL"], {"m": 1})

    stats = await cache_controller.get_cache_stats(cache_management_use_case=use_case)

    assert stats.total_entries == 1
    assert stats.max_size == 100


@pytest.mark.asyncio
async def test_clear_cache(use_case) -> None:
    await use_case.analytics_cache.set_metrics("today", ["ALL"], {"m": 1})

    body = await cache_controller.clear_cache(cache_management_use_case=use_case)

    assert body == {"removed": 1}


@pytest.mark.asyncio
async def test_invalidate_category(use_case) -> None:
    await use_case.analytics_cache.set_forecast("month", ["ALL"], 7, data={"f": 1})

    body = await cache_controller.invalidate_cache_category(
        "forecast", cache_management_use_case=use_case
    )

    assert body == {"category": "forecast", "removed": 1}


@pytest.mark.asyncio
async def test_unknown_category_is_404(use_case) -> None:
    with pytest.raises(HTTPException) as exc_info:
        await cache_controller.invalidate_cache_category(
            "bogus", cache_management_use_case=use_case
        )

    assert exc_info.value.status_code == 404
