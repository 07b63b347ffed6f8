"""
Factory for creating cache instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum

from shortlink_app.config import settings
from .strategies import CacheStrategy, InMemoryCache, NullCache, RedisCache

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Simple factory for creating cache instances.

    Uses Singleton Pattern - creates instance once, reuses it.
    Gets configuration from settings (not passed as parameters).
    """

    _instance: CacheStrategy = None

    @classmethod
    def create(cls, backend: CacheBackend) -> CacheStrategy:
        """
        Create or return cached cache instance.

        A Redis backend that cannot be reached at startup falls back to the
        in-memory cache; the service keeps working without a shared cache.
        """
        if cls._instance is not None:
            return cls._instance

        if backend == CacheBackend.REDIS:
            import redis

            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                redis_client.ping()

                cls._instance = RedisCache(redis_client)
                logger.info("Redis cache initialized")

            except Exception as e:
                logger.warning("Redis connection failed (%s), falling back to in-memory cache", e)
                cls._instance = InMemoryCache()

        elif backend == CacheBackend.MEMORY:
            cls._instance = InMemoryCache()
            logger.info("In-memory cache initialized")

        elif backend == CacheBackend.NULL:
            cls._instance = NullCache()
            logger.info("Null cache initialized")

        else:
            raise ValueError(f"Unknown cache backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
