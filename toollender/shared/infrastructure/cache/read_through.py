# 📄 File: toollender/shared/infrastructure/cache/read_through.py
# 🧭 Purpose (Layman Explanation):
# The rulebook every ToolLender data accessor follows: show saved data instantly and
# refresh it quietly in the background, ask the server when nothing is saved, and
# fall back to the last known data when the server can't be reached.
# 🧪 Purpose (Technical Summary):
# Generic read-through repository base over a RemoteStoreClient, a LocalStore and a
# CacheSynchronizer. Implements cache-first reads with single-flight background
# refresh, blocking server reads persisted as the new local baseline, last-known-good
# fallback when the server read fails, and write-through helpers.
# 🔗 Dependencies:
# remote_store.base, cache.local_store, cache.synchronizer, shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# modules/tool_lending/infrastructure/repositories/*_repository_impl.py

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from toollender.shared.core.exceptions import (
    CacheError,
    DecodeError,
    NotFoundError,
    RemoteStoreError,
    is_read_degradable,
)
from toollender.shared.infrastructure.remote_store.base import (
    Document,
    FieldFilter,
    OrderBy,
    ReadMode,
    RemoteStoreClient,
    apply_query,
)
from toollender.shared.utils.logging import get_logger
from .local_store import LocalStore, snapshot_scope
from .synchronizer import CacheSynchronizer

logger = get_logger(__name__)

T = TypeVar("T")


class ReadThroughRepository(ABC, Generic[T]):
    """
    Base class for repositories backed by a remote collection and a local copy.

    Reads with ReadMode.CACHE return cached data immediately when a complete
    snapshot of the requested scope is stored, and schedule a server refresh;
    the refreshed data is only visible to later reads. Reads with
    ReadMode.SERVER, or cache misses, wait for the server and store the
    result locally.

    Subclasses provide decoding and record conversion and may override
    ``_degraded_default`` to return a placeholder instead of raising when
    a single entity cannot be reached.
    """

    entity_name = "entity"
    default_order: Optional[OrderBy] = None

    def __init__(
        self,
        remote: RemoteStoreClient,
        local_store: LocalStore,
        synchronizer: CacheSynchronizer,
        collection: str,
    ):
        self.remote = remote
        self.local_store = local_store
        self.synchronizer = synchronizer
        self.collection = collection

    @property
    def cache_key(self) -> str:
        return self.collection

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _decode(self, document: Document) -> T:
        """Build an entity from a document, raising DecodeError if malformed."""
        pass

    @abstractmethod
    def _to_record(self, entity: T) -> Dict[str, Any]:
        """JSON-safe mapping of an entity including its ``id``."""
        pass

    def _degraded_default(self, entity_id: str, error: RemoteStoreError) -> T:
        raise error

    # ------------------------------------------------------------------
    # Collection reads
    # ------------------------------------------------------------------

    async def _read_collection(
        self,
        read_mode: ReadMode,
        filters: Sequence[FieldFilter] = (),
        order: Optional[OrderBy] = None,
    ) -> List[T]:
        order = order or self.default_order
        key = self._refresh_key(filters)

        if read_mode is ReadMode.CACHE:
            cached = await self._cached_collection(filters, order)
            if cached:
                logger.performance.log_cache_operation("hit", "collection", key, hit=True)
                self.synchronizer.schedule(key, lambda: self._refresh_collection(filters, order))
                return cached
            logger.performance.log_cache_operation("miss", "collection", key, hit=False)

        try:
            return await self._refresh_collection(filters, order)
        except RemoteStoreError as e:
            fallback = self._local_collection(filters, order) or []
            logger.warning(
                f"Server read failed for {key} ({e.error_code}), "
                f"serving {len(fallback)} cached {self.entity_name} records",
                cache_key=key,
                error_code=e.error_code,
            )
            return fallback

    async def _cached_collection(
        self,
        filters: Sequence[FieldFilter],
        order: Optional[OrderBy],
    ) -> List[T]:
        local = self._local_collection(filters, order)
        if local:
            return local
        if self.local_store.exists(self.cache_key):
            # Only narrower scopes are stored; the client cache was filled by the same reads.
            return []

        try:
            documents = await self.remote.query(self.collection, filters, order, mode=ReadMode.CACHE)
        except RemoteStoreError as e:
            logger.debug(f"Client cache read failed for {self.collection}: {e}")
            return []
        return self._decode_many(documents)

    async def _refresh_collection(
        self,
        filters: Sequence[FieldFilter],
        order: Optional[OrderBy],
    ) -> List[T]:
        issued = time.time()
        documents = await self.remote.query(self.collection, filters, order, mode=ReadMode.SERVER)
        entities = self._decode_many(documents)
        self._persist(
            lambda: self.local_store.save(
                self.cache_key,
                [self._to_record(entity) for entity in entities],
                stamp=issued,
                filters=filters,
            )
        )
        return entities

    def _local_collection(
        self,
        filters: Sequence[FieldFilter],
        order: Optional[OrderBy],
    ) -> Optional[List[T]]:
        # A subset saved by a narrower read must not pass for the whole scope.
        if not self.local_store.has_snapshot(self.cache_key, filters):
            return None
        records = self.local_store.load(self.cache_key, filters)
        if records is None:
            return None
        return self._decode_many(
            _record_to_document(record) for record in apply_query(records, order=order)
        )

    def _decode_many(self, documents) -> List[T]:
        entities = []
        for document in documents:
            try:
                entities.append(self._decode(document))
            except DecodeError as e:
                logger.warning(
                    f"Skipping malformed {self.entity_name} document {document.id}: {e.message}",
                    **e.details,
                )
        return entities

    # ------------------------------------------------------------------
    # Single document reads
    # ------------------------------------------------------------------

    async def _read_document(self, entity_id: str, read_mode: ReadMode) -> T:
        key = f"{self.collection}/{entity_id}"

        if read_mode is ReadMode.CACHE:
            cached = await self._cached_document(entity_id)
            if cached is not None:
                logger.performance.log_cache_operation("hit", "document", key, hit=True)
                self.synchronizer.schedule(key, lambda: self._refresh_document(entity_id))
                return cached
            logger.performance.log_cache_operation("miss", "document", key, hit=False)

        try:
            return await self._refresh_document(entity_id)
        except RemoteStoreError as e:
            if not is_read_degradable(e):
                raise
            local = self._local_document(entity_id)
            if local is not None:
                logger.warning(f"Server unreachable for {key}, serving cached copy", cache_key=key)
                return local
            logger.warning(f"Server unreachable for {key} and nothing cached", cache_key=key)
            return self._degraded_default(entity_id, e)

    async def _cached_document(self, entity_id: str) -> Optional[T]:
        local = self._local_document(entity_id)
        if local is not None:
            return local

        try:
            document = await self.remote.get(self.collection, entity_id, mode=ReadMode.CACHE)
        except RemoteStoreError as e:
            logger.debug(f"Client cache read failed for {self.collection}/{entity_id}: {e}")
            return None
        if document is None:
            return None
        try:
            return self._decode(document)
        except DecodeError:
            return None

    async def _refresh_document(self, entity_id: str) -> T:
        issued = time.time()
        document = await self.remote.get(self.collection, entity_id, mode=ReadMode.SERVER)
        if document is None:
            self._persist(lambda: self.local_store.remove(self.cache_key, entity_id, stamp=issued))
            raise NotFoundError(
                f"{self.entity_name.capitalize()} {entity_id} not found",
                resource_type=self.entity_name,
                resource_id=entity_id,
            )

        entity = self._decode(document)
        self._persist(lambda: self.local_store.upsert(self.cache_key, self._to_record(entity), stamp=issued))
        return entity

    def _local_document(self, entity_id: str) -> Optional[T]:
        entry = self.local_store.load_one(self.cache_key, entity_id)
        if entry is None or entry.is_tombstone:
            return None
        try:
            return self._decode(_record_to_document(entry.value))
        except DecodeError as e:
            logger.warning(f"Ignoring malformed cached {self.entity_name} {entity_id}: {e.message}")
            return None

    # ------------------------------------------------------------------
    # Write-through
    # ------------------------------------------------------------------

    def _remember(self, entity: T) -> None:
        """Record an entity the caller just wrote."""
        self._persist(lambda: self.local_store.upsert(self.cache_key, self._to_record(entity)))

    def _remember_fields(self, entity_id: str, fields: Dict[str, Any]) -> None:
        """Apply a merge write to the cached copy, if there is one."""
        entry = self.local_store.load_one(self.cache_key, entity_id)
        if entry is None or entry.is_tombstone:
            return
        self._persist(
            lambda: self.local_store.upsert(self.cache_key, {**entry.value, **fields, "id": entity_id})
        )

    def _forget(self, entity_id: str) -> None:
        """Record that the caller just deleted an entity."""
        self._persist(lambda: self.local_store.remove(self.cache_key, entity_id))

    def _persist(self, write) -> None:
        # The remote store already has the data; a failing local copy only costs freshness.
        try:
            write()
        except CacheError as e:
            logger.warning(f"Local cache write failed for {self.cache_key}: {e.message}", **e.details)

    def _refresh_key(self, filters: Sequence[FieldFilter]) -> str:
        if not filters:
            return self.collection
        return f"{self.collection}?{snapshot_scope(filters)}"


def _record_to_document(record: Dict[str, Any]) -> Document:
    data = dict(record)
    doc_id = str(data.pop("id"))
    return Document(id=doc_id, data=data)
