"""
Tests for the connectivity monitor and reachability probe.
"""

import asyncio

import pytest

from toollender.shared.infrastructure.connectivity.monitor import (
    ConnectivityMonitor,
    ConnectivityState,
)
from toollender.shared.infrastructure.connectivity.probe import ReachabilityProbe


class FakeProbe:
    def __init__(self):
        self.started = 0
        self.stopped = 0
        self.report = None

    def start(self, report):
        self.started += 1
        self.report = report

    async def stop(self):
        self.stopped += 1


@pytest.mark.asyncio
async def test_listeners_fire_only_on_transitions():
    monitor = ConnectivityMonitor()
    seen = []
    monitor.add_listener(seen.append)

    assert await monitor.update(True) is True
    assert await monitor.update(True) is False
    assert await monitor.update(False) is True
    assert await monitor.update(False) is False
    assert await monitor.update(True) is True

    assert seen == [True, False, True]
    assert monitor.state is ConnectivityState.ONLINE
    assert monitor.is_online


@pytest.mark.asyncio
async def test_state_starts_unknown():
    monitor = ConnectivityMonitor()

    assert monitor.state is ConnectivityState.UNKNOWN
    assert not monitor.is_online


@pytest.mark.asyncio
async def test_async_listeners_are_awaited():
    monitor = ConnectivityMonitor()
    seen = []

    async def listener(online):
        await asyncio.sleep(0)
        seen.append(online)

    monitor.add_listener(listener)
    await monitor.update(False)

    assert seen == [False]


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others():
    monitor = ConnectivityMonitor()
    seen = []

    def broken(online):
        raise RuntimeError("listener bug")

    monitor.add_listener(broken)
    monitor.add_listener(seen.append)

    await monitor.update(True)

    assert seen == [True]


@pytest.mark.asyncio
async def test_removed_listener_is_not_called():
    monitor = ConnectivityMonitor()
    seen = []
    remove = monitor.add_listener(seen.append)

    await monitor.update(True)
    remove()
    await monitor.update(False)

    assert seen == [True]


@pytest.mark.asyncio
async def test_start_is_idempotent():
    probe = FakeProbe()
    monitor = ConnectivityMonitor(probe=probe)

    await monitor.start()
    await monitor.start()

    assert monitor.is_started
    assert probe.started == 1
    assert probe.report == monitor.update

    await monitor.stop()
    await monitor.stop()

    assert probe.stopped == 1
    assert not monitor.is_started


@pytest.mark.asyncio
async def test_probe_reports_each_check():
    probe = ReachabilityProbe("http://probe.invalid", interval=0.01)
    results = iter([True, True, False])
    reports = []
    done = asyncio.Event()

    async def check():
        return next(results, False)

    async def report(reachable):
        reports.append(reachable)
        if len(reports) == 3:
            done.set()
        return True

    probe.check = check
    probe.start(report)
    await asyncio.wait_for(done.wait(), timeout=1.0)
    await probe.stop()

    assert reports[:3] == [True, True, False]
    assert not probe.is_running
