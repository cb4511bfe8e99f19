"""
Tests for single-flight background refreshes.
"""

import asyncio

import pytest

from toollender.shared.infrastructure.cache.synchronizer import CacheSynchronizer


class GatedRefresh:
    """Refresh coroutine that blocks until released."""

    def __init__(self):
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        await self.release.wait()


@pytest.mark.asyncio
async def test_second_schedule_joins_running_refresh():
    synchronizer = CacheSynchronizer()
    refresh = GatedRefresh()

    first = synchronizer.schedule("tools", refresh)
    second = synchronizer.schedule("tools", refresh)
    await asyncio.sleep(0)

    assert first is second
    assert synchronizer.is_pending("tools")
    assert refresh.calls == 1

    refresh.release.set()
    await synchronizer.drain()

    stats = synchronizer.get_stats()
    assert stats["scheduled"] == 1
    assert stats["coalesced"] == 1
    assert stats["succeeded"] == 1
    assert stats["in_flight"] == 0
    assert not synchronizer.is_pending("tools")


@pytest.mark.asyncio
async def test_key_can_refresh_again_after_completion():
    synchronizer = CacheSynchronizer()
    calls = []

    async def refresh():
        calls.append("refresh")

    await synchronizer.schedule("tools", refresh)
    await synchronizer.schedule("tools", refresh)

    assert calls == ["refresh", "refresh"]


@pytest.mark.asyncio
async def test_different_keys_run_independently():
    synchronizer = CacheSynchronizer()
    tools = GatedRefresh()
    users = GatedRefresh()

    synchronizer.schedule("tools", tools)
    synchronizer.schedule("users/u1", users)
    await asyncio.sleep(0)

    assert sorted(synchronizer.pending_keys()) == ["tools", "users/u1"]

    users.release.set()
    await asyncio.sleep(0.01)
    assert synchronizer.pending_keys() == ["tools"]

    tools.release.set()
    await synchronizer.drain()


@pytest.mark.asyncio
async def test_failed_refresh_is_logged_not_raised():
    synchronizer = CacheSynchronizer()

    async def refresh():
        raise RuntimeError("server said no")

    task = synchronizer.schedule("tools", refresh)
    await task

    assert synchronizer.stats["failed"] == 1
    assert synchronizer.stats["last_error"] == "server said no"
    assert not synchronizer.is_pending("tools")


@pytest.mark.asyncio
async def test_shutdown_can_cancel_running_refreshes():
    synchronizer = CacheSynchronizer()
    refresh = GatedRefresh()

    synchronizer.schedule("tools", refresh)
    await asyncio.sleep(0)
    await synchronizer.shutdown(cancel=True)

    assert synchronizer.stats["cancelled"] == 1
    assert synchronizer.pending_keys() == []


@pytest.mark.asyncio
async def test_shutdown_waits_for_refreshes_by_default():
    synchronizer = CacheSynchronizer()
    finished = []

    async def refresh():
        await asyncio.sleep(0.01)
        finished.append(True)

    synchronizer.schedule("tools", refresh)
    await synchronizer.shutdown()

    assert finished == [True]
