# 📄 File: toollender/shared/config/redis.py
#
# 🧭 Purpose (Layman Explanation):
# Configuration for the optional Redis-backed offline copy, so ToolLender can keep
# its last-known tools, profile and associations in Redis instead of local files.
#
# 🧪 Purpose (Technical Summary):
# Redis connection pool configuration (environment-specific socket options) and
# key patterns for the Redis local store backend.
#
# 🔗 Dependencies:
# - redis Python package (synchronous client)
# - toollender.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - toollender.shared.infrastructure.cache.redis_store
# - toollender.container

from typing import Any, Dict, Optional

import redis
from redis import ConnectionPool, Redis

from .settings import Settings, get_settings


# =============================================================================
# REDIS CONFIGURATION CLASS
# =============================================================================

class RedisConfig:
    """Redis configuration class with connection management."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._connection_pool: Optional[ConnectionPool] = None
        self._redis_client: Optional[Redis] = None

    @property
    def redis_url(self) -> str:
        """Get Redis connection URL."""
        return self.settings.REDIS_URL

    @property
    def connection_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection configuration."""

        base_config = {
            "encoding": "utf-8",
            "decode_responses": True,
            "retry_on_timeout": True,
            "retry_on_error": [
                redis.ConnectionError,
                redis.TimeoutError,
            ],
            "health_check_interval": 30,
        }

        # Environment-specific configurations
        if self.settings.is_production:
            base_config.update({
                "socket_timeout": 5.0,
                "socket_connect_timeout": 5.0,
                "socket_keepalive": True,
            })
        elif self.settings.is_development:
            base_config.update({
                "socket_timeout": 10.0,
                "socket_connect_timeout": 10.0,
            })

        return base_config

    @property
    def pool_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection pool configuration."""
        return {
            "max_connections": self.settings.REDIS_MAX_CONNECTIONS,
            **self.connection_kwargs
        }

    def create_connection_pool(self) -> ConnectionPool:
        """Create Redis connection pool."""
        if self._connection_pool is None:
            self._connection_pool = ConnectionPool.from_url(
                self.redis_url,
                **self.pool_kwargs
            )
        return self._connection_pool

    def create_redis_client(self) -> Redis:
        """Create Redis client with connection pool."""
        if self._redis_client is None:
            pool = self.create_connection_pool()
            self._redis_client = Redis(connection_pool=pool)
        return self._redis_client

    def close_connections(self):
        """Close Redis connections and cleanup."""
        if self._redis_client:
            self._redis_client.close()
            self._redis_client = None

        if self._connection_pool:
            self._connection_pool.disconnect()
            self._connection_pool = None


# =============================================================================
# CACHE KEY CONFIGURATION
# =============================================================================

class CacheConfig:
    """Key patterns for locally cached collections."""

    KEY_PATTERNS = {
        "collection": "{prefix}:cache:{collection_key}",
    }

    @classmethod
    def get_cache_key(cls, pattern_name: str, **kwargs) -> str:
        """
        Generate cache key from pattern and parameters.

        Args:
            pattern_name: Name of the key pattern
            **kwargs: Parameters to substitute in the pattern

        Returns:
            Formatted cache key string
        """
        if pattern_name not in cls.KEY_PATTERNS:
            raise ValueError(f"Unknown cache key pattern: {pattern_name}")

        pattern = cls.KEY_PATTERNS[pattern_name]
        try:
            return pattern.format(**kwargs)
        except KeyError as e:
            raise ValueError(f"Missing parameter {e} for pattern {pattern_name}")
