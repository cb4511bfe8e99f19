# 📄 File: toollender/shared/infrastructure/connectivity/probe.py

# 🧭 Purpose (Layman Explanation):
# Every so often, knocks on the server's door to see whether anyone answers, and
# reports "online" or "offline" to the connectivity monitor.

# 🧪 Purpose (Technical Summary):
# Periodic HTTP reachability probe built on an aiohttp ClientSession. Any HTTP
# response counts as reachable; client errors and timeouts count as unreachable.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - asyncio: Background polling task

# 🔄 Connected Modules / Calls From:
# Called by: connectivity/monitor.py (start/stop), toollender.container

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout

logger = logging.getLogger(__name__)


class ReachabilityProbe:
    """Polls a URL and reports whether it answered."""

    def __init__(self, url: str, interval: float = 15.0, timeout: float = 5.0):
        self.url = url
        self.interval = interval
        self.timeout = timeout
        self.session: Optional[ClientSession] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, report: Callable[[bool], Awaitable[bool]]) -> None:
        """Start polling in the background, sending each result to ``report``."""
        if self.is_running:
            logger.warning("Reachability probe is already running")
            return
        self._task = asyncio.get_running_loop().create_task(self._poll_loop(report))
        logger.info(f"Reachability probe started for {self.url} every {self.interval}s")

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def check(self) -> bool:
        """Perform one probe request."""
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                connector=aiohttp.TCPConnector(limit=1),
            )
        try:
            async with self.session.head(self.url, allow_redirects=True) as response:
                logger.debug(f"Probe {self.url} answered {response.status}")
                return True
        except (ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Probe {self.url} failed: {e}")
            return False

    async def _poll_loop(self, report: Callable[[bool], Awaitable[bool]]) -> None:
        while True:
            await report(await self.check())
            await asyncio.sleep(self.interval)
