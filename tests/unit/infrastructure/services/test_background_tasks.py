from __future__ import annotations

import asyncio

import pytest

from src.infrastructure.services.background_tasks import (
    PeriodicTask,
    create_alert_monitor,
    create_cache_sweeper,
)


class _Counter:
    def __init__(self, fail: bool = False):
        self.calls = 0
        self.fail = fail

    async def __call__(self) -> None:
        self.calls += 1
        if self.fail:
            raise RuntimeError("boom")


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PeriodicTask("bad", _Counter(), 0)


@pytest.mark.asyncio
async def test_task_runs_repeatedly_until_stopped() -> None:
    action = _Counter()
    task = PeriodicTask("counter", action, 0.01)

    task.start()
    await asyncio.sleep(0.06)
    await task.stop()

    assert action.calls >= 2
    assert task.running is False


@pytest.mark.asyncio
async def test_failures_are_logged_and_the_loop_continues() -> None:
    action = _Counter(fail=True)
    task = PeriodicTask("failing", action, 0.01)

    task.start()
    await asyncio.sleep(0.05)
    assert task.running is True
    await task.stop()

    assert action.calls >= 2


@pytest.mark.asyncio
async def test_disabled_task_never_starts() -> None:
    task = PeriodicTask("disabled", _Counter(), 1, enabled=False)

    task.start()

    assert task.running is False
    await task.stop()


@pytest.mark.asyncio
async def test_factories_bind_actions() -> None:
    class _Cache:
        async def sweep(self) -> int:
            return 0

    class _Monitor:
        async def run_cycle(self) -> None:
            return None

    sweeper = create_cache_sweeper(_Cache(), interval=5)
    monitor = create_alert_monitor(_Monitor(), interval=10, enabled=False)

    assert sweeper.name == "cache_sweeper"
    assert sweeper.interval == 5
    assert monitor.enabled is False
    await sweeper.run_once()
