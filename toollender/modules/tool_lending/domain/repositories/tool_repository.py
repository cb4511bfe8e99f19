# 📄 File: toollender/modules/tool_lending/domain/repositories/tool_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines what can be done with tool listings (list them, find one, add one,
# put one on hold, remove one) without saying where they are stored.
# 🧪 Purpose (Technical Summary):
# Repository interface for Tool entities. Reads take a ReadMode choosing a fast
# cached answer with background refresh or a forced server round trip.
# 🔗 Dependencies:
# abc, typing, domain models, remote_store.base.ReadMode
# 🔄 Connected Modules / Calls From:
# tool_repository_impl.py, tool_upload_service.py, container (reconnect refresh)

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from toollender.shared.infrastructure.remote_store.base import ReadMode
from ..models.tool import Tool, ToolDraft


class ToolRepository(ABC):
    """
    Repository interface for Tool entity data access operations.

    Implementation Notes:
    - Collection reads never raise because the server is unreachable;
      they return the last known data or an empty list
    - Writes always go to the remote store and raise on failure
    """

    @abstractmethod
    async def fetch_all(self, read_mode: ReadMode = ReadMode.CACHE) -> List[Tool]:
        """
        Get all tools, newest first.

        Args:
            read_mode: CACHE for a fast answer refreshed in the background,
                SERVER to wait for the authoritative data

        Returns:
            List of tools (possibly stale with CACHE)
        """
        pass

    @abstractmethod
    async def fetch_by_owner(self, owner_id: str, read_mode: ReadMode = ReadMode.CACHE) -> List[Tool]:
        """
        Get tools owned by a user.

        Args:
            owner_id: Owner's user ID
            read_mode: Cache or server read

        Returns:
            Tools whose owner is ``owner_id``
        """
        pass

    @abstractmethod
    async def fetch_one(self, tool_id: str, read_mode: ReadMode = ReadMode.CACHE) -> Tool:
        """
        Get a tool by ID.

        Raises:
            NotFoundError: If the server has no such tool
            DecodeError: If the stored tool is malformed
            RemoteUnavailableError: If the server is unreachable and nothing is cached
        """
        pass

    @abstractmethod
    async def create(self, draft: ToolDraft) -> Tool:
        """
        Create a tool listing.

        Args:
            draft: Tool input; name, description, owner and category must not be blank

        Returns:
            The stored tool as re-read from the server

        Raises:
            ValidationError: If a required field is blank (nothing is written)
        """
        pass

    @abstractmethod
    async def update(self, tool_id: str, fields: Dict[str, Any]) -> None:
        """Merge ``fields`` (document field names) into a tool; empty is a no-op."""
        pass

    @abstractmethod
    async def toggle_hold(self, tool: Tool) -> Tool:
        """
        Flip the on-hold flag.

        Not atomic: two concurrent toggles of the same tool may both write
        the same value.

        Returns:
            The tool with the new flag
        """
        pass

    @abstractmethod
    async def delete(self, tool_id: str) -> None:
        """Delete a tool."""
        pass
