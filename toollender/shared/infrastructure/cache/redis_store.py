# 📄 File: toollender/shared/infrastructure/cache/redis_store.py
# 🧭 Purpose (Layman Explanation):
# Keeps ToolLender's offline notebook in Redis instead of files, handy when several
# processes on one machine should share the same last-known data.
# 🧪 Purpose (Technical Summary):
# Redis backend for the Local Store: one JSON string per collection key, named by
# CacheConfig's key pattern. Read errors degrade to a miss, write errors raise
# CacheError.
# 🔗 Dependencies:
# redis (synchronous client), toollender.shared.config.redis
# 🔄 Connected Modules / Calls From:
# toollender.container (LOCAL_STORE_BACKEND=redis), tests

import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from toollender.shared.config.redis import CacheConfig
from toollender.shared.core.exceptions import CacheError
from .local_store import LocalStore

logger = logging.getLogger(__name__)


class RedisLocalStore(LocalStore):
    """Local Store keeping each collection as a JSON value in Redis."""

    def __init__(self, client: Redis, prefix: str = "toollender"):
        super().__init__()
        self.client = client
        self.prefix = prefix

    def _key(self, collection_key: str) -> str:
        return CacheConfig.get_cache_key("collection", prefix=self.prefix, collection_key=collection_key)

    def _read_raw(self, collection_key: str) -> Optional[str]:
        try:
            raw = self.client.get(self._key(collection_key))
        except RedisError as e:
            logger.warning(f"Redis read failed for {collection_key}: {e}")
            return None
        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="replace")
        return raw

    def _write_raw(self, collection_key: str, payload: str) -> None:
        try:
            self.client.set(self._key(collection_key), payload)
        except RedisError as e:
            raise CacheError(
                f"Redis write failed: {e}",
                operation="write",
                key=collection_key,
            ) from e

    def _delete_raw(self, collection_key: str) -> None:
        try:
            self.client.delete(self._key(collection_key))
        except RedisError as e:
            raise CacheError(
                f"Redis delete failed: {e}",
                operation="delete",
                key=collection_key,
            ) from e
