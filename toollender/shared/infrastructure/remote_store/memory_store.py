# 📄 File: toollender/shared/infrastructure/remote_store/memory_store.py
# 🧭 Purpose (Layman Explanation):
# A pretend online database that lives in memory, so ToolLender can run and be
# tested without a real server, including pretending the network is down or slow.
# 🧪 Purpose (Technical Summary):
# In-process RemoteStoreClient with a separate server state and implicit client
# cache, switchable availability, artificial latency, emulated unique constraints
# and a call log for assertions.
# 🔗 Dependencies:
# asyncio, copy, uuid, remote_store.base, shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# toollender.container (REMOTE_STORE_BACKEND=memory), tests

import asyncio
import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from toollender.shared.core.exceptions import (
    RemoteConflictError,
    RemoteUnavailableError,
)
from .base import (
    Document,
    FieldFilter,
    OrderBy,
    ReadMode,
    RemoteStoreClient,
    WriteMode,
    apply_query,
    resolve_server_timestamps,
)


class InMemoryRemoteStoreClient(RemoteStoreClient):
    """
    Remote store emulator backed by dictionaries.

    The "server" state is what every SERVER read sees. The client cache
    only holds documents this client has read from or written to the
    server, mirroring an SDK's offline persistence.
    """

    def __init__(
        self,
        latency: float = 0.0,
        unique_fields: Optional[Dict[str, Sequence[str]]] = None,
    ):
        self._server: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._cache: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._unique_fields = {k: tuple(v) for k, v in (unique_fields or {}).items()}
        self.latency = latency
        self.online = True
        self.cache_available = True
        self.calls: List[Tuple[str, str, str]] = []

    # ------------------------------------------------------------------
    # Test and development helpers
    # ------------------------------------------------------------------

    def seed(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Put a document on the server without touching the client cache."""
        self._server.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def server_snapshot(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self._server.get(collection, {}))

    def cached_ids(self, collection: str) -> List[str]:
        return list(self._cache.get(collection, {}))

    def count_calls(self, operation: str, mode: Optional[str] = None) -> int:
        return sum(
            1 for op, _, call_mode in self.calls
            if op == operation and (mode is None or call_mode == mode)
        )

    @property
    def write_count(self) -> int:
        return sum(1 for op, _, _ in self.calls if op in ("set", "add", "delete"))

    # ------------------------------------------------------------------
    # RemoteStoreClient
    # ------------------------------------------------------------------

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order: Optional[OrderBy] = None,
        mode: ReadMode = ReadMode.SERVER,
    ) -> List[Document]:
        self.calls.append(("query", collection, mode.value))
        if mode is ReadMode.CACHE:
            self._check_cache(collection, "query")
            records = self._records(self._cache, collection)
            return [self._to_document(r) for r in apply_query(records, filters, order)]

        await self._round_trip(collection, "query")
        records = apply_query(self._records(self._server, collection), filters, order)

        cached = self._cache.setdefault(collection, {})
        returned = {r["id"] for r in records}
        for doc_id, data in list(cached.items()):
            if doc_id not in returned and all(f.matches(data) for f in filters):
                del cached[doc_id]
        for record in records:
            cached[record["id"]] = copy.deepcopy(self._server[collection][record["id"]])

        return [self._to_document(r) for r in records]

    async def get(
        self,
        collection: str,
        doc_id: str,
        mode: ReadMode = ReadMode.SERVER,
    ) -> Optional[Document]:
        self.calls.append(("get", collection, mode.value))
        if mode is ReadMode.CACHE:
            self._check_cache(collection, "get")
            data = self._cache.get(collection, {}).get(doc_id)
            return Document(id=doc_id, data=copy.deepcopy(data)) if data is not None else None

        await self._round_trip(collection, "get")
        data = self._server.get(collection, {}).get(doc_id)
        cached = self._cache.setdefault(collection, {})
        if data is None:
            cached.pop(doc_id, None)
            return None
        cached[doc_id] = copy.deepcopy(data)
        return Document(id=doc_id, data=copy.deepcopy(data))

    async def set(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        mode: WriteMode = WriteMode.OVERWRITE,
    ) -> None:
        self.calls.append(("set", collection, mode.value))
        await self._round_trip(collection, "set")
        resolved = resolve_server_timestamps(fields, datetime.now(timezone.utc))

        docs = self._server.setdefault(collection, {})
        if mode is WriteMode.MERGE and doc_id in docs:
            data = {**docs[doc_id], **resolved}
        else:
            data = dict(resolved)
        self._check_unique(collection, doc_id, data)

        docs[doc_id] = copy.deepcopy(data)
        self._cache.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    async def add(self, collection: str, fields: Dict[str, Any]) -> str:
        self.calls.append(("add", collection, WriteMode.OVERWRITE.value))
        await self._round_trip(collection, "add")
        doc_id = uuid4().hex[:20]
        data = resolve_server_timestamps(fields, datetime.now(timezone.utc))
        self._check_unique(collection, doc_id, data)

        self._server.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        self._cache.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        return doc_id

    async def delete(self, collection: str, doc_id: str) -> None:
        self.calls.append(("delete", collection, WriteMode.OVERWRITE.value))
        await self._round_trip(collection, "delete")
        self._server.get(collection, {}).pop(doc_id, None)
        self._cache.get(collection, {}).pop(doc_id, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _round_trip(self, collection: str, operation: str) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if not self.online:
            raise RemoteUnavailableError(
                "Remote store is offline",
                operation=operation,
                collection=collection,
            )

    def _check_cache(self, collection: str, operation: str) -> None:
        if not self.cache_available:
            raise RemoteUnavailableError(
                "Client cache is unavailable",
                operation=operation,
                collection=collection,
            )

    def _check_unique(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        for unique_field in self._unique_fields.get(collection, ()):
            value = data.get(unique_field)
            for other_id, other in self._server.get(collection, {}).items():
                if other_id != doc_id and other.get(unique_field) == value:
                    raise RemoteConflictError(
                        f"Duplicate value for {unique_field}: {value}",
                        operation="write",
                        collection=collection,
                        details={"field": unique_field},
                    )

    @staticmethod
    def _records(source: Dict[str, Dict[str, Dict[str, Any]]], collection: str) -> List[Dict[str, Any]]:
        return [{**data, "id": doc_id} for doc_id, data in source.get(collection, {}).items()]

    @staticmethod
    def _to_document(record: Dict[str, Any]) -> Document:
        data = copy.deepcopy(record)
        doc_id = data.pop("id")
        return Document(id=doc_id, data=data)
