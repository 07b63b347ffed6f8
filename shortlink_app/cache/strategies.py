"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

The cache is advisory: every backend swallows its own I/O errors and reports
them as a miss (get) or a failed write (set). Callers never see a cache error.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def alias_cache_key(prefix: str, code: str) -> str:
    """Namespaced key under which an alias record is cached"""
    return f"{prefix}:{code}"


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    All methods are async because cache operations involve I/O (network for Redis).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Returns:
            Cached value or None on miss or failure
        """

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 0) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds, 0 keeps the key until evicted

        Returns:
            True if successful, False otherwise
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if key exists in cache"""


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Shared by every API process, so an alias cached at creation time on one
    server is visible to redirects served by another. The client is blocking,
    so each call runs in a worker thread and a slow server never stalls the
    event loop.
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await asyncio.to_thread(self.redis.get, key)
            return value.decode("utf-8") if value else None
        except Exception as e:
            logger.warning("Redis get failed for %s: %s", key, e)
            return None

    async def set(self, key: str, value: str, ttl: int = 0) -> bool:
        try:
            if ttl > 0:
                return bool(await asyncio.to_thread(self.redis.setex, key, ttl, value))
            return bool(await asyncio.to_thread(self.redis.set, key, value))
        except Exception as e:
            logger.warning("Redis set failed for %s: %s", key, e)
            return False

    async def exists(self, key: str) -> bool:
        try:
            return bool(await asyncio.to_thread(self.redis.exists, key))
        except Exception as e:
            logger.warning("Redis exists failed for %s: %s", key, e)
            return False


class InMemoryCache(CacheStrategy):
    """
    In-memory cache implementation using Python dict.

    Per-process and lost on restart. TTL is ignored.
    Used in development/testing environments.
    """

    def __init__(self):
        self._cache: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    async def set(self, key: str, value: str, ttl: int = 0) -> bool:
        self._cache[key] = value
        return True

    async def exists(self, key: str) -> bool:
        return key in self._cache


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every lookup is a miss, so every redirect goes to the alias store.
    """

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: int = 0) -> bool:
        return True

    async def exists(self, key: str) -> bool:
        return False
