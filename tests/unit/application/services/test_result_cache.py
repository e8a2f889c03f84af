from __future__ import annotations

import json

import pytest

from src.application.services.result_cache import ResultCache, build_cache_key
from src.shared.consts import CACHE_BACKUP_KEY, CACHE_STORAGE_KEY


def _cache(store, clock, **kwargs) -> ResultCache:
    return ResultCache(store, clock=clock, **kwargs)


def test_build_cache_key_is_order_insensitive_for_object_keys() -> None:
    first = build_cache_key("metrics", {"b": 1, "a": [1, 2]}, "today")
    second = build_cache_key("metrics", {"a": [1, 2], "b": 1}, "today")

    assert first == second
    assert first.startswith("metrics:")


def test_build_cache_key_distinguishes_parameter_order() -> None:
    assert build_cache_key("chart", "a", "b") != build_cache_key("chart", "b", "a")


@pytest.mark.asyncio
async def test_get_returns_data_until_ttl_elapses(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock)
    await cache.set("metrics", "today", ["ALL"], data={"total": 10}, ttl=60)

    fake_clock.advance(59)
    assert cache.get("metrics", "today", ["ALL"]) == {"total": 10}

    fake_clock.advance(1)
    assert cache.get("metrics", "today", ["ALL"]) is None
    # expired entries stay until swept
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_set_uses_default_ttl(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, default_ttl=300)
    await cache.set("comparison", "week", data=[1, 2])

    fake_clock.advance(299)
    assert cache.get("comparison", "week") == [1, 2]
    fake_clock.advance(1)
    assert cache.get("comparison", "week") is None


@pytest.mark.asyncio
async def test_full_cache_evicts_oldest_entry(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, max_size=3)
    for index in range(3):
        await cache.set("export", index, data=index)
        fake_clock.advance(1)

    await cache.set("export", 3, data=3)

    assert len(cache) == 3
    assert cache.get("export", 0) is None
    assert [cache.get("export", i) for i in (1, 2, 3)] == [1, 2, 3]


@pytest.mark.asyncio
async def test_eviction_ties_remove_earliest_inserted(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, max_size=2)
    await cache.set("export", "first", data=1)
    await cache.set("export", "second", data=2)

    await cache.set("export", "third", data=3)

    assert build_cache_key("export", "first") not in cache
    assert build_cache_key("export", "second") in cache


@pytest.mark.asyncio
async def test_overwriting_key_does_not_evict(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, max_size=2)
    await cache.set("export", "a", data=1)
    await cache.set("export", "b", data=2)

    await cache.set("export", "a", data=10)

    assert len(cache) == 2
    assert cache.get("export", "a") == 10
    assert cache.get("export", "b") == 2


@pytest.mark.asyncio
async def test_invalidate_single_key_and_category(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock)
    await cache.set("metrics", "today", data=1)
    await cache.set("metrics", "week", data=2)
    await cache.set("forecast", "today", data=3)

    assert await cache.invalidate("metrics", "today") == 1
    assert cache.get("metrics", "week") == 2

    assert await cache.invalidate("metrics") == 1
    assert cache.get("metrics", "week") is None
    assert cache.get("forecast", "today") == 3


@pytest.mark.asyncio
async def test_sweep_removes_only_expired_entries(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock)
    await cache.set("metrics", "short", data=1, ttl=10)
    await cache.set("metrics", "long", data=2, ttl=100)

    fake_clock.advance(50)

    assert await cache.sweep() == 1
    assert len(cache) == 1
    assert cache.get("metrics", "long") == 2


@pytest.mark.asyncio
async def test_stats_report_hit_rate_and_usage(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, max_size=4)
    await cache.set("metrics", "today", data=1, ttl=10)
    await cache.set("metrics", "week", data=2, ttl=100)

    cache.get("metrics", "today")
    cache.get("metrics", "missing")
    fake_clock.advance(20)

    stats = cache.stats()

    assert stats.total_entries == 2
    assert stats.expired_entries == 1
    assert stats.valid_entries == 1
    assert stats.hit_rate == pytest.approx(50.0)
    assert stats.usage_percent == pytest.approx(50.0)


@pytest.mark.asyncio
async def test_entries_survive_restart_through_storage(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock)
    await cache.set("metrics", "today", data={"total": 5}, ttl=60)
    await cache.set("metrics", "stale", data=1, ttl=5)

    fake_clock.advance(10)
    restarted = _cache(memory_store, fake_clock)
    await restarted.initialize()

    assert restarted.get("metrics", "today") == {"total": 5}
    assert len(restarted) == 1


@pytest.mark.asyncio
async def test_restart_with_smaller_max_size_keeps_newest_entries(
    memory_store, fake_clock
) -> None:
    cache = _cache(memory_store, fake_clock, max_size=5)
    for index in range(5):
        await cache.set("export", index, data=index)
        fake_clock.advance(1)

    restarted = _cache(memory_store, fake_clock, max_size=2)
    await restarted.initialize()

    assert len(restarted) == 2
    assert restarted.get("export", 3) == 3
    assert restarted.get("export", 4) == 4
    assert restarted.get("export", 0) is None
    assert len(json.loads(await memory_store.get_item(CACHE_STORAGE_KEY))) == 2

    await restarted.set("export", 5, data=5)

    assert len(restarted) == 2
    assert restarted.get("export", 5) == 5


@pytest.mark.asyncio
async def test_persisted_snapshot_is_a_list_of_key_entry_pairs(
    memory_store, fake_clock
) -> None:
    cache = _cache(memory_store, fake_clock)
    await cache.set("export", "e1", data=[1], ttl=30)

    snapshot = json.loads(await memory_store.get_item(CACHE_STORAGE_KEY))

    assert snapshot == [
        [
            'export:"e1"',
            {"key": 'export:"e1"', "data": [1], "timestamp": fake_clock.now, "ttl": 30},
        ]
    ]


@pytest.mark.asyncio
async def test_no_persistence_when_disabled(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, persist_to_storage=False)
    await cache.set("metrics", "today", data=1)

    assert await memory_store.get_item(CACHE_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_corrupt_snapshot_starts_empty(memory_store, fake_clock) -> None:
    await memory_store.set_item(CACHE_STORAGE_KEY, "{not json")
    cache = _cache(memory_store, fake_clock)

    await cache.initialize()

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_storage_failures_do_not_break_the_cache(failing_store, fake_clock) -> None:
    cache = _cache(failing_store, fake_clock)
    await cache.initialize()

    await cache.set("metrics", "today", data=1)
    await cache.clear()
    await cache.set("metrics", "today", data=2)

    assert cache.get("metrics", "today") == 2
    assert await cache.get_backup_metrics() is None


@pytest.mark.asyncio
async def test_clear_drops_entries_and_snapshot(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock)
    await cache.set("metrics", "today", data=1)

    await cache.clear()

    assert len(cache) == 0
    assert await memory_store.get_item(CACHE_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_backup_metrics_expire_after_max_age(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, persist_to_storage=False, backup_max_age=100)
    await cache.set_backup_metrics({"totalSales": {"current": 1}})

    assert await memory_store.get_item(CACHE_BACKUP_KEY) is not None
    fake_clock.advance(99)
    assert await cache.get_backup_metrics() == {"totalSales": {"current": 1}}
    fake_clock.advance(1)
    assert await cache.get_backup_metrics() is None


@pytest.mark.asyncio
async def test_update_config_shrinks_by_evicting_oldest(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, max_size=5)
    for index in range(4):
        await cache.set("export", index, data=index)
        fake_clock.advance(1)

    cache.update_config(max_size=2, default_ttl=42)

    assert len(cache) == 2
    assert cache.get("export", 3) == 3
    assert cache.default_ttl == 42
    with pytest.raises(ValueError):
        cache.update_config(max_size=0)


@pytest.mark.asyncio
async def test_export_cache_includes_entries_and_config(memory_store, fake_clock) -> None:
    cache = _cache(memory_store, fake_clock, max_size=10)
    await cache.set("chart", "sales", data={"points": []})

    dump = cache.export_cache()

    assert dump["config"]["max_size"] == 10
    assert dump["entries"][0]["data"] == {"points": []}
    assert dump["stats"]["total_entries"] == 1
