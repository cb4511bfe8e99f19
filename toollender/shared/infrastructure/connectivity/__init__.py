"""
Connectivity tracking for ToolLender.
Provides the edge-triggered monitor and the aiohttp reachability probe.
"""

from .monitor import ConnectivityMonitor, ConnectivityState
from .probe import ReachabilityProbe

__all__ = [
    "ConnectivityMonitor",
    "ConnectivityState",
    "ReachabilityProbe",
]
