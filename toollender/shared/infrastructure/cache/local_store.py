# 📄 File: toollender/shared/infrastructure/cache/local_store.py
# 🧭 Purpose (Layman Explanation):
# The offline notebook of ToolLender: it remembers the last tools, profiles and
# associations seen, so the app still shows something when the internet is gone.
# 🧪 Purpose (Technical Summary):
# Durable key-value Local Store holding per-entity stamped entries per collection
# key. Snapshots merge by last-write-by-timestamp and record the scope they cover,
# deletes leave tombstones that expire, and corrupt data is treated as a miss.
# Backends only implement raw get/put/delete of one serialized collection;
# FileLocalStore writes one JSON file per key.
# 🔗 Dependencies:
# json, threading, pathlib, toollender.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# cache/read_through.py, cache/redis_store.py, container, tests

import copy
import json
import logging
import os
import re
import tempfile
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from toollender.shared.core.exceptions import CacheError

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

# Seconds a tombstone is kept, measured against the stamp of later writes.
TOMBSTONE_RETENTION = 24 * 60 * 60


@dataclass
class CacheEntry:
    """
    A cached entity with the time it was observed.

    ``value`` is None for a tombstone left by a delete.
    """
    value: Optional[Dict[str, Any]]
    stamp: float

    @property
    def is_tombstone(self) -> bool:
        return self.value is None

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "stamp": self.stamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        value = data["value"]
        if value is not None and not isinstance(value, dict):
            raise ValueError("entry value must be an object or null")
        return cls(value=value, stamp=float(data["stamp"]))


@dataclass
class _Collection:
    entries: Dict[str, CacheEntry] = field(default_factory=dict)
    stamp: float = 0.0
    # Snapshot scope -> stamp of the newest snapshot taken for it
    scopes: Dict[str, float] = field(default_factory=dict)

    def dumps(self) -> str:
        return json.dumps(
            {
                "version": FORMAT_VERSION,
                "stamp": self.stamp,
                "scopes": self.scopes,
                "entries": {k: v.to_dict() for k, v in self.entries.items()},
            },
            default=str,
        )

    @classmethod
    def loads(cls, raw: str) -> "_Collection":
        data = json.loads(raw)
        if not isinstance(data, dict) or data.get("version") != FORMAT_VERSION:
            raise ValueError("unsupported cache format")
        entries = {
            str(entity_id): CacheEntry.from_dict(entry)
            for entity_id, entry in data["entries"].items()
        }
        scopes = {str(k): float(v) for k, v in data.get("scopes", {}).items()}
        return cls(entries=entries, stamp=float(data.get("stamp", 0.0)), scopes=scopes)


def snapshot_scope(filters: Sequence[Any]) -> str:
    """
    Name the part of a collection a snapshot covers.

    The whole collection is ``""``; a filtered snapshot is named by its
    sorted ``field=value`` pairs, e.g. ``"ownerId=u1"``.
    """
    return "&".join(sorted(f"{f.field}={f.value}" for f in filters))


def _in_scope(value: Optional[Dict[str, Any]], filters: Sequence[Any]) -> bool:
    # Tombstones carry no fields, so only a whole-collection snapshot covers them.
    if value is None:
        return not filters
    return all(f.matches(value) for f in filters)


def _prune_tombstones(entries: Dict[str, CacheEntry], stamp: float) -> None:
    cutoff = stamp - TOMBSTONE_RETENTION
    for entity_id in [k for k, v in entries.items() if v.is_tombstone and v.stamp < cutoff]:
        del entries[entity_id]


class LocalStore(ABC):
    """
    Local Store base class.

    Every public operation is a read-modify-write of one serialized collection
    under a re-entrant lock, so a background refresh and a foreground write
    never interleave.

    Filters are any objects with ``field``, ``value`` and
    ``matches(record) -> bool`` (the remote store's FieldFilter).
    """

    def __init__(self):
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _read_raw(self, collection_key: str) -> Optional[str]:
        """Return the serialized collection, or None if absent."""
        pass

    @abstractmethod
    def _write_raw(self, collection_key: str, payload: str) -> None:
        pass

    @abstractmethod
    def _delete_raw(self, collection_key: str) -> None:
        pass

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def save(
        self,
        collection_key: str,
        records: Iterable[Dict[str, Any]],
        stamp: Optional[float] = None,
        filters: Sequence[Any] = (),
    ) -> None:
        """
        Merge a snapshot of records into the collection.

        A record replaces its entry unless the entry is newer than ``stamp``.
        Entries missing from the snapshot that fall inside ``filters`` and are
        older than ``stamp`` are dropped, since the snapshot shows they no
        longer exist. Older tombstones are dropped only by whole-collection
        snapshots. Snapshot order is kept for the records it contains, and
        the snapshot's scope is recorded for ``has_snapshot``.

        Args:
            collection_key: Collection key
            records: Mappings carrying an ``id``
            stamp: Time the snapshot was read; defaults to now
            filters: Scope of the snapshot (empty means the whole collection)
        """
        stamp = time.time() if stamp is None else stamp
        with self._lock:
            current = self._read_collection(collection_key) or _Collection()
            merged: Dict[str, CacheEntry] = {}
            incoming = set()

            for record in records:
                entity_id = str(record["id"])
                incoming.add(entity_id)
                existing = current.entries.get(entity_id)
                if existing is not None and existing.stamp > stamp:
                    merged[entity_id] = existing
                else:
                    merged[entity_id] = CacheEntry(value=copy.deepcopy(dict(record)), stamp=stamp)

            for entity_id, entry in current.entries.items():
                if entity_id in incoming:
                    continue
                if entry.stamp < stamp and _in_scope(entry.value, filters):
                    continue
                merged[entity_id] = entry

            _prune_tombstones(merged, stamp)
            scope = snapshot_scope(filters)
            current.entries = merged
            current.stamp = max(current.stamp, stamp)
            current.scopes[scope] = max(current.scopes.get(scope, 0.0), stamp)
            self._write_collection(collection_key, current)

    def load(self, collection_key: str, filters: Sequence[Any] = ()) -> Optional[List[Dict[str, Any]]]:
        """
        Load live records of a collection.

        Returns:
            Records matching ``filters`` (tombstones skipped), or None when
            the collection was never saved or its data is unreadable
        """
        with self._lock:
            current = self._read_collection(collection_key)
        if current is None:
            return None
        return [
            copy.deepcopy(entry.value)
            for entry in current.entries.values()
            if entry.value is not None and all(f.matches(entry.value) for f in filters)
        ]

    def load_one(self, collection_key: str, entity_id: str) -> Optional[CacheEntry]:
        """
        Load a single entry, tombstones included.

        Returns:
            The entry, or None if nothing is known about ``entity_id``
        """
        with self._lock:
            current = self._read_collection(collection_key)
        if current is None:
            return None
        entry = current.entries.get(str(entity_id))
        return copy.deepcopy(entry) if entry is not None else None

    def exists(self, collection_key: str) -> bool:
        with self._lock:
            return self._read_collection(collection_key) is not None

    def has_snapshot(self, collection_key: str, filters: Sequence[Any] = ()) -> bool:
        """
        Whether ``load(collection_key, filters)`` reflects a complete snapshot.

        True when the whole collection, or exactly the scope named by
        ``filters``, has been saved. Entries written one at a time, or saved
        under a narrower scope, do not count.
        """
        with self._lock:
            current = self._read_collection(collection_key)
        if current is None:
            return False
        return "" in current.scopes or snapshot_scope(filters) in current.scopes

    def snapshot_stamp(self, collection_key: str) -> Optional[float]:
        """Stamp of the newest snapshot merged into the collection."""
        with self._lock:
            current = self._read_collection(collection_key)
        return current.stamp if current is not None else None

    def upsert(self, collection_key: str, record: Dict[str, Any], stamp: Optional[float] = None) -> None:
        """Write one record unless a newer entry already exists."""
        self._put_entry(collection_key, str(record["id"]), copy.deepcopy(dict(record)), stamp)

    def remove(self, collection_key: str, entity_id: str, stamp: Optional[float] = None) -> None:
        """Leave a tombstone for ``entity_id`` unless a newer entry exists."""
        self._put_entry(collection_key, str(entity_id), None, stamp)

    def clear(self, collection_key: str) -> None:
        with self._lock:
            self._delete_raw(collection_key)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _put_entry(
        self,
        collection_key: str,
        entity_id: str,
        value: Optional[Dict[str, Any]],
        stamp: Optional[float],
    ) -> None:
        stamp = time.time() if stamp is None else stamp
        with self._lock:
            current = self._read_collection(collection_key) or _Collection()
            existing = current.entries.get(entity_id)
            if existing is not None and existing.stamp > stamp:
                logger.debug(f"Skipping stale write to {collection_key}/{entity_id}")
                return
            current.entries[entity_id] = CacheEntry(value=value, stamp=stamp)
            _prune_tombstones(current.entries, stamp)
            self._write_collection(collection_key, current)

    def _read_collection(self, collection_key: str) -> Optional[_Collection]:
        raw = self._read_raw(collection_key)
        if raw is None:
            return None
        try:
            return _Collection.loads(raw)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Discarding unreadable cache data for {collection_key}: {e}")
            return None

    def _write_collection(self, collection_key: str, collection: _Collection) -> None:
        self._write_raw(collection_key, collection.dumps())


class FileLocalStore(LocalStore):
    """Local Store keeping one JSON file per collection key."""

    def __init__(self, directory: Path):
        super().__init__()
        self.directory = Path(directory)

    def _path(self, collection_key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", collection_key)
        return self.directory / f"{safe}.json"

    def _read_raw(self, collection_key: str) -> Optional[str]:
        path = self._path(collection_key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read cache file {path}: {e}")
            return None

    def _write_raw(self, collection_key: str, payload: str) -> None:
        path = self._path(collection_key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CacheError(
                f"Cannot write cache file {path}: {e}",
                operation="write",
                key=collection_key,
            ) from e

    def _delete_raw(self, collection_key: str) -> None:
        path = self._path(collection_key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise CacheError(
                f"Cannot delete cache file {path}: {e}",
                operation="delete",
                key=collection_key,
            ) from e
