# 📄 File: toollender/shared/infrastructure/cache/synchronizer.py
# 🧭 Purpose (Layman Explanation):
# After showing saved data right away, ToolLender quietly asks the server for the
# newest version in the background. This helper runs those background refreshes and
# makes sure the same refresh is never running twice at once.
# 🧪 Purpose (Technical Summary):
# Single-flight background refresh scheduler. Each key has at most one running
# asyncio task; further requests for that key join the running task. Tasks are
# kept referenced until they finish, failures are logged and counted, and the
# caller can drain or cancel what is in flight on shutdown.
# 🔗 Dependencies:
# asyncio, toollender.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# cache/read_through.py, toollender.container

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List

from toollender.shared.utils.logging import get_logger

logger = get_logger(__name__)

RefreshFn = Callable[[], Awaitable[Any]]


class CacheSynchronizer:
    """
    Runs cache refreshes concurrently with their callers.

    A refresh is attempted once. Its result is applied by the refresh
    coroutine itself; the synchronizer only supervises it. A caller reading
    right after scheduling may still see the older cached data.
    """

    def __init__(self):
        self._inflight: Dict[str, asyncio.Task] = {}
        self.stats = {
            'scheduled': 0,
            'coalesced': 0,
            'succeeded': 0,
            'failed': 0,
            'cancelled': 0,
            'last_error': None,
        }

    def schedule(self, key: str, refresh: RefreshFn) -> asyncio.Task:
        """
        Schedule ``refresh`` under ``key`` unless one is already running.

        Must be called from within a running event loop.

        Args:
            key: Identity of the data being refreshed
            refresh: Zero-argument coroutine function performing the refresh

        Returns:
            The task running the refresh for ``key``
        """
        running = self._inflight.get(key)
        if running is not None and not running.done():
            self.stats['coalesced'] += 1
            logger.debug(f"Refresh already in flight for {key}")
            return running

        task = asyncio.get_running_loop().create_task(self._run(key, refresh), name=f"refresh:{key}")
        self._inflight[key] = task
        self.stats['scheduled'] += 1
        return task

    async def _run(self, key: str, refresh: RefreshFn) -> None:
        started = time.perf_counter()
        try:
            await refresh()
            self.stats['succeeded'] += 1
            logger.performance.log_cache_operation(
                operation="refresh",
                cache_type="background",
                key=key,
                duration_ms=(time.perf_counter() - started) * 1000,
            )
        except asyncio.CancelledError:
            self.stats['cancelled'] += 1
            raise
        except Exception as e:
            self.stats['failed'] += 1
            self.stats['last_error'] = str(e)
            logger.warning(
                f"Background refresh failed for {key}: {e}",
                cache_key=key,
                error_type=type(e).__name__,
            )
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

    def is_pending(self, key: str) -> bool:
        task = self._inflight.get(key)
        return task is not None and not task.done()

    def pending_keys(self) -> List[str]:
        return [key for key, task in self._inflight.items() if not task.done()]

    def get_stats(self) -> Dict[str, Any]:
        """Counters plus the number of refreshes currently running."""
        return {**self.stats, 'in_flight': len(self.pending_keys())}

    async def drain(self) -> None:
        """Wait until every in-flight refresh has finished."""
        while True:
            pending = [task for task in self._inflight.values() if not task.done()]
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)
        # Tasks cancelled before they started never reach their own cleanup.
        self._inflight = {k: t for k, t in self._inflight.items() if not t.done()}

    async def shutdown(self, cancel: bool = False) -> None:
        """
        Stop supervising refreshes.

        Args:
            cancel: Cancel running refreshes instead of waiting for them
        """
        if cancel:
            for task in list(self._inflight.values()):
                task.cancel()
        await self.drain()
        logger.info("Cache synchronizer stopped", **self.get_stats())
