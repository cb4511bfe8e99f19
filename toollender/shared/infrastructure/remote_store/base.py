# 📄 File: toollender/shared/infrastructure/remote_store/base.py
# 🧭 Purpose (Layman Explanation):
# Describes how ToolLender talks to the online database without caring which
# database it is: read from the quick local copy or ask the server, write, add, delete.
# 🧪 Purpose (Technical Summary):
# Remote document store port (abstract client), read/write mode enums, query
# filter and ordering value objects, and the in-process query evaluator shared
# by adapters that serve cache-mode reads from a local snapshot.
# 🔗 Dependencies:
# abc, dataclasses, enum, typing
# 🔄 Connected Modules / Calls From:
# supabase_store.py, memory_store.py, cache/read_through.py, repository implementations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence


class ReadMode(str, Enum):
    """
    Where a read is served from.

    CACHE reads use locally available data (fast, possibly stale).
    SERVER reads force a round trip to the authoritative store.
    """
    CACHE = "cache"
    SERVER = "server"


class WriteMode(str, Enum):
    """How a set() call treats fields absent from the payload."""
    OVERWRITE = "overwrite"
    MERGE = "merge"


class _ServerTimestamp:
    """Sentinel replaced by the store's current time on write."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class FieldFilter:
    """Equality filter on a document field."""
    field: str
    value: Any

    def matches(self, data: Dict[str, Any]) -> bool:
        return data.get(self.field) == self.value


@dataclass(frozen=True)
class OrderBy:
    """Ordering on a document field; documents missing the field sort last."""
    field: str
    descending: bool = False


@dataclass
class Document:
    """A remote document: store-assigned id plus its field data."""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        """Flatten into a single mapping carrying the id."""
        return {**self.data, "id": self.id}


def apply_query(
    records: Iterable[Dict[str, Any]],
    filters: Sequence[FieldFilter] = (),
    order: Optional[OrderBy] = None,
) -> List[Dict[str, Any]]:
    """
    Evaluate equality filters and ordering against in-process records.

    Sorting is stable, so records with equal keys keep their source order.
    """
    matched = [r for r in records if all(f.matches(r) for f in filters)]
    if order is None:
        return matched

    present = [r for r in matched if r.get(order.field) is not None]
    missing = [r for r in matched if r.get(order.field) is None]
    present.sort(key=lambda r: _sort_key(r[order.field]), reverse=order.descending)
    return present + missing


def _sort_key(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def resolve_server_timestamps(fields: Dict[str, Any], now: Any) -> Dict[str, Any]:
    """Replace every SERVER_TIMESTAMP sentinel with ``now``."""
    return {
        key: (now if value is SERVER_TIMESTAMP else value)
        for key, value in fields.items()
    }


class RemoteStoreClient(ABC):
    """
    Port for the remote document store.

    Implementations must support both read modes and report connectivity
    failures as RemoteUnavailableError, uniqueness violations as
    RemoteConflictError and anything else as RemoteStoreError.

    Implementation Notes:
    - Server-mode reads and all writes refresh the client's own cache,
      so a later cache-mode read sees them.
    - Cache-mode query() returns an empty list on a miss; cache-mode
      get() returns None.
    """

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order: Optional[OrderBy] = None,
        mode: ReadMode = ReadMode.SERVER,
    ) -> List[Document]:
        """
        Query documents in a collection.

        Args:
            collection: Collection name
            filters: Equality filters, all of which must match
            order: Optional ordering
            mode: Cache or server read

        Returns:
            Matching documents
        """
        pass

    @abstractmethod
    async def get(
        self,
        collection: str,
        doc_id: str,
        mode: ReadMode = ReadMode.SERVER,
    ) -> Optional[Document]:
        """
        Fetch a single document.

        Returns:
            The document, or None when absent
        """
        pass

    @abstractmethod
    async def set(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        mode: WriteMode = WriteMode.OVERWRITE,
    ) -> None:
        """Write a document at a known id, overwriting or merging."""
        pass

    @abstractmethod
    async def add(self, collection: str, fields: Dict[str, Any]) -> str:
        """
        Create a document with a store-assigned id.

        Returns:
            The new document id
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document; deleting an absent document is not an error."""
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None
