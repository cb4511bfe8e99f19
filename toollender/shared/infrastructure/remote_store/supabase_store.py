# 📄 File: toollender/shared/infrastructure/remote_store/supabase_store.py
# 🧭 Purpose (Layman Explanation):
# Talks to the Supabase online database for ToolLender: reading tools, users and
# associations, saving changes, and remembering what it last saw so it can answer
# quickly without asking the server again.
# 🧪 Purpose (Technical Summary):
# RemoteStoreClient adapter over Supabase PostgREST tables. Blocking client calls
# run in worker threads; server reads and writes refresh an in-process snapshot
# that serves cache-mode reads. Transport failures map to RemoteUnavailableError,
# unique violations to RemoteConflictError.
# 🔗 Dependencies:
# supabase (via SupabaseManager), postgrest APIError, httpx, asyncio
# 🔄 Connected Modules / Calls From:
# toollender.container (REMOTE_STORE_BACKEND=supabase)

import asyncio
import copy
import time
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import uuid4

import httpx
from postgrest import APIError

from toollender.shared.config.supabase import SupabaseManager
from toollender.shared.core.exceptions import (
    RemoteConflictError,
    RemoteStoreError,
    RemoteUnavailableError,
)
from toollender.shared.utils.logging import get_logger
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

logger = get_logger(__name__)

# PostgreSQL unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseRemoteStoreClient(RemoteStoreClient):
    """
    Supabase-backed remote document store.

    Each collection is a table with a text ``id`` primary key; the remaining
    columns hold the document fields.
    """

    def __init__(self, manager: SupabaseManager):
        self.manager = manager
        self._snapshot: Dict[str, Dict[str, Dict[str, Any]]] = {}

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order: Optional[OrderBy] = None,
        mode: ReadMode = ReadMode.SERVER,
    ) -> List[Document]:
        if mode is ReadMode.CACHE:
            records = [
                {**data, "id": doc_id}
                for doc_id, data in self._snapshot.get(collection, {}).items()
            ]
            return [_record_to_document(r) for r in apply_query(records, filters, order)]

        def run():
            builder = self.manager.table(collection).select("*")
            for field_filter in filters:
                builder = builder.eq(field_filter.field, field_filter.value)
            if order is not None:
                builder = builder.order(order.field, desc=order.descending)
            return builder.execute()

        response = await self._execute("query", collection, mode, run)
        rows = response.data or []

        cached = self._snapshot.setdefault(collection, {})
        returned = {str(row["id"]) for row in rows}
        for doc_id, data in list(cached.items()):
            if doc_id not in returned and all(f.matches(data) for f in filters):
                del cached[doc_id]

        documents = [_record_to_document(row) for row in rows]
        for document in documents:
            cached[document.id] = copy.deepcopy(document.data)
        return documents

    async def get(
        self,
        collection: str,
        doc_id: str,
        mode: ReadMode = ReadMode.SERVER,
    ) -> Optional[Document]:
        if mode is ReadMode.CACHE:
            data = self._snapshot.get(collection, {}).get(doc_id)
            return Document(id=doc_id, data=copy.deepcopy(data)) if data is not None else None

        def run():
            return self.manager.table(collection).select("*").eq("id", doc_id).limit(1).execute()

        response = await self._execute("get", collection, mode, run)
        rows = response.data or []
        cached = self._snapshot.setdefault(collection, {})
        if not rows:
            cached.pop(doc_id, None)
            return None

        document = _record_to_document(rows[0])
        cached[document.id] = copy.deepcopy(document.data)
        return document

    async def set(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        mode: WriteMode = WriteMode.OVERWRITE,
    ) -> None:
        payload = _serialize(resolve_server_timestamps(fields, datetime.now(timezone.utc)))

        if mode is WriteMode.MERGE:
            def run():
                response = self.manager.table(collection).update(payload).eq("id", doc_id).execute()
                if not response.data:
                    response = self.manager.table(collection).insert({**payload, "id": doc_id}).execute()
                return response
        else:
            def run():
                return self.manager.table(collection).upsert({**payload, "id": doc_id}).execute()

        response = await self._execute("set", collection, mode, run)
        self._remember_written(collection, doc_id, payload, response, merge=mode is WriteMode.MERGE)

    async def add(self, collection: str, fields: Dict[str, Any]) -> str:
        doc_id = uuid4().hex[:20]
        payload = _serialize(resolve_server_timestamps(fields, datetime.now(timezone.utc)))

        def run():
            return self.manager.table(collection).insert({**payload, "id": doc_id}).execute()

        response = await self._execute("add", collection, WriteMode.OVERWRITE, run)
        self._remember_written(collection, doc_id, payload, response, merge=False)
        return doc_id

    async def delete(self, collection: str, doc_id: str) -> None:
        def run():
            return self.manager.table(collection).delete().eq("id", doc_id).execute()

        await self._execute("delete", collection, WriteMode.OVERWRITE, run)
        self._snapshot.get(collection, {}).pop(doc_id, None)

    async def close(self) -> None:
        self._snapshot.clear()
        self.manager.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _execute(self, operation: str, collection: str, mode, call: Callable[[], Any]) -> Any:
        """Run a blocking PostgREST call off the event loop and translate its errors."""
        started = time.perf_counter()
        success = False
        try:
            response = await asyncio.to_thread(call)
            success = True
            return response

        except (httpx.TransportError, httpx.TimeoutException, ConnectionError) as e:
            raise RemoteUnavailableError(
                f"Supabase unreachable during {operation}: {e}",
                operation=operation,
                collection=collection,
            ) from e

        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise RemoteConflictError(
                    f"Unique constraint violated on {collection}: {e.message}",
                    operation=operation,
                    collection=collection,
                    details={"hint": e.hint, "detail": e.details},
                ) from e
            raise RemoteStoreError(
                f"Supabase API error during {operation}: {e.message}",
                operation=operation,
                collection=collection,
                details={"code": e.code},
            ) from e

        finally:
            logger.performance.log_remote_call(
                operation=operation,
                collection=collection,
                mode=mode.value,
                duration_ms=(time.perf_counter() - started) * 1000,
                success=success,
            )

    def _remember_written(
        self,
        collection: str,
        doc_id: str,
        payload: Dict[str, Any],
        response: Any,
        merge: bool,
    ) -> None:
        cached = self._snapshot.setdefault(collection, {})
        rows = getattr(response, "data", None) or []
        if rows:
            cached[doc_id] = _record_to_document(rows[0]).data
        elif merge and doc_id in cached:
            cached[doc_id] = {**cached[doc_id], **payload}
        else:
            cached[doc_id] = copy.deepcopy(payload)


def _record_to_document(record: Dict[str, Any]) -> Document:
    data = dict(record)
    doc_id = str(data.pop("id"))
    return Document(id=doc_id, data=data)


def _serialize(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert values PostgREST cannot encode as JSON."""
    return {
        key: value.isoformat() if isinstance(value, (datetime, date)) else value
        for key, value in fields.items()
    }
