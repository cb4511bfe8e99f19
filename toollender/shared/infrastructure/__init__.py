"""
Infrastructure layer package for ToolLender.
Provides the remote store port and adapters, the local cache, connectivity
tracking and blob storage.
"""

__all__ = [
    "cache",
    "connectivity",
    "remote_store",
    "storage",
]
