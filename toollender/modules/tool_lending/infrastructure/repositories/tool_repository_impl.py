# 📄 File: toollender/modules/tool_lending/infrastructure/repositories/tool_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Stores and loads tool listings, answering from the offline copy when possible and
# keeping that copy up to date with the online database.
#
# 🧪 Purpose (Technical Summary):
# Concrete ToolRepository over the read-through cache base: newest-first collection
# reads, owner-scoped reads, create with server re-read, merge updates, hold
# toggling and deletes, all written through to the Local Store.
#
# 🔗 Dependencies:
# - toollender.shared.infrastructure.cache.read_through (cache policy)
# - toollender.shared.infrastructure.remote_store (port, query objects)
# - toollender.modules.tool_lending.domain (Tool model, repository interface)
#
# 🔄 Connected Modules / Calls From:
# - toollender.container (construction, reconnect refresh)
# - application services (tool upload)

from typing import Any, Dict, List

from toollender.shared.infrastructure.cache.local_store import LocalStore
from toollender.shared.infrastructure.cache.read_through import ReadThroughRepository
from toollender.shared.infrastructure.cache.synchronizer import CacheSynchronizer
from toollender.shared.infrastructure.remote_store.base import (
    SERVER_TIMESTAMP,
    Document,
    FieldFilter,
    OrderBy,
    ReadMode,
    RemoteStoreClient,
    WriteMode,
)
from toollender.shared.utils.logging import get_logger
from toollender.modules.tool_lending.domain.models.tool import Tool, ToolDraft
from toollender.modules.tool_lending.domain.repositories.tool_repository import ToolRepository

logger = get_logger(__name__)


class ToolRepositoryImpl(ToolRepository, ReadThroughRepository[Tool]):
    """
    Remote store implementation of the ToolRepository interface.
    """

    entity_name = "tool"
    default_order = OrderBy("createdAt", descending=True)

    def __init__(
        self,
        remote: RemoteStoreClient,
        local_store: LocalStore,
        synchronizer: CacheSynchronizer,
        collection: str = "tools",
    ):
        super().__init__(remote, local_store, synchronizer, collection)

    def _decode(self, document: Document) -> Tool:
        return Tool.from_document(document.id, document.data)

    def _to_record(self, entity: Tool) -> Dict[str, Any]:
        return entity.to_record()

    async def fetch_all(self, read_mode: ReadMode = ReadMode.CACHE) -> List[Tool]:
        return await self._read_collection(read_mode)

    async def fetch_by_owner(self, owner_id: str, read_mode: ReadMode = ReadMode.CACHE) -> List[Tool]:
        return await self._read_collection(read_mode, filters=(FieldFilter("ownerId", owner_id),))

    async def fetch_one(self, tool_id: str, read_mode: ReadMode = ReadMode.CACHE) -> Tool:
        return await self._read_document(tool_id, read_mode)

    async def create(self, draft: ToolDraft) -> Tool:
        """
        Create a tool listing and return it as stored.

        The document is re-read from the server so the returned tool carries
        the store-assigned id and creation time.
        """
        draft = draft.validate_required()
        fields = {**draft.to_document_fields(), "createdAt": SERVER_TIMESTAMP}

        tool_id = await self.remote.add(self.collection, fields)
        tool = await self._refresh_document(tool_id)

        logger.log_business_event(
            "tool_created",
            f"Tool {tool.name} created",
            entity_id=tool.id,
            entity_type="tool",
            extra={"owner_id": tool.owner_id, "category": tool.category},
        )
        return tool

    async def update(self, tool_id: str, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        await self.remote.set(self.collection, tool_id, fields, WriteMode.MERGE)
        self._remember_fields(tool_id, fields)
        logger.debug(f"Tool {tool_id} updated: {sorted(fields)}")

    async def toggle_hold(self, tool: Tool) -> Tool:
        is_on_hold = not tool.is_on_hold
        await self.remote.set(self.collection, tool.id, {"isOnHold": is_on_hold}, WriteMode.MERGE)

        updated = tool.with_hold(is_on_hold)
        self._remember(updated)
        logger.log_business_event(
            "tool_hold_toggled",
            f"Tool {tool.id} {'put on hold' if is_on_hold else 'released'}",
            entity_id=tool.id,
            entity_type="tool",
        )
        return updated

    async def delete(self, tool_id: str) -> None:
        await self.remote.delete(self.collection, tool_id)
        self._forget(tool_id)
        logger.log_business_event("tool_deleted", f"Tool {tool_id} deleted", entity_id=tool_id, entity_type="tool")
