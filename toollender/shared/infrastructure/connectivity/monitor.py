# 📄 File: toollender/shared/infrastructure/connectivity/monitor.py
# 🧭 Purpose (Layman Explanation):
# Keeps track of whether ToolLender can reach the internet and tells interested
# parts of the app the moment it goes online or offline.
# 🧪 Purpose (Technical Summary):
# Edge-triggered connectivity state machine (UNKNOWN, ONLINE, OFFLINE). Listeners,
# sync or async, are notified only on transitions; failing listeners are logged
# and do not stop the others. An optional reachability probe feeds update().
# 🔗 Dependencies:
# asyncio, inspect, enum
# 🔄 Connected Modules / Calls From:
# connectivity/probe.py, toollender.container (reconnect refresh), tests

import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Union

logger = logging.getLogger(__name__)

Listener = Callable[[bool], Union[None, Awaitable[None]]]


class ConnectivityState(str, Enum):
    """Reachability level of the remote store."""
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


class ConnectivityMonitor:
    """
    Notifies listeners when reachability changes.

    Listeners added after a transition only see later transitions.
    """

    def __init__(self, probe=None):
        self.probe = probe
        self._state = ConnectivityState.UNKNOWN
        self._listeners: List[Listener] = []
        self._started = False

    @property
    def state(self) -> ConnectivityState:
        return self._state

    @property
    def is_online(self) -> bool:
        return self._state is ConnectivityState.ONLINE

    @property
    def is_started(self) -> bool:
        return self._started

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with True on reconnect and False on disconnect.

        Returns:
            A callable that unregisters the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            self.remove_listener(listener)

        return remove

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start(self) -> None:
        """Start monitoring; calling it again while started does nothing."""
        if self._started:
            return
        self._started = True
        if self.probe is not None:
            self.probe.start(self.update)
        logger.info("Connectivity monitor started")

    async def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        if self.probe is not None:
            await self.probe.stop()
        logger.info("Connectivity monitor stopped")

    async def update(self, reachable: bool) -> bool:
        """
        Feed a reachability observation.

        Args:
            reachable: Whether the remote store can currently be reached

        Returns:
            True if the observation changed the state
        """
        new_state = ConnectivityState.ONLINE if reachable else ConnectivityState.OFFLINE
        if new_state is self._state:
            return False

        previous, self._state = self._state, new_state
        logger.info(f"Connectivity changed: {previous.value} -> {new_state.value}")

        for listener in list(self._listeners):
            try:
                result = listener(reachable)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Connectivity listener {listener!r} failed: {e}", exc_info=True)

        return True
