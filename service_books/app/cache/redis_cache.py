"""
Redis caching layer for the Books Service.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from shared.errors import CacheUnavailableError


class RedisCacheStore:
    """String key/value cache on Redis.

    Entries are written without expiry; they leave the cache only through
    explicit invalidation. Transport failures are raised as
    ``CacheUnavailableError`` so that callers can absorb them.
    """

    def __init__(self, redis_url: str, socket_timeout: float = 5):
        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self.logger = get_logger("books.cache.redis")
        self.redis: Optional[redis.Redis] = None

    async def start(self):
        """Start the Redis cache.

        An unreachable Redis is logged and tolerated; the service runs on
        the backing store alone until the cache comes back.
        """
        self.redis = redis.from_url(
            self.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=self.socket_timeout,
            socket_timeout=self.socket_timeout,
            retry_on_timeout=True,
            health_check_interval=30
        )

        try:
            await self.redis.ping()
            self.logger.info("Redis cache started")
        except (RedisError, OSError) as e:
            self.logger.warning("Redis unreachable at startup; continuing without cache", error=str(e))

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis:
            await self.redis.aclose()
            self.logger.info("Redis cache stopped")

    async def get(self, key: str) -> Optional[str]:
        client = self._client()
        try:
            return await client.get(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError("Redis get failed", {"key": key, "error": str(e)})

    async def set(self, key: str, value: str) -> None:
        client = self._client()
        try:
            await client.set(key, value)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError("Redis set failed", {"key": key, "error": str(e)})

    async def delete(self, key: str) -> None:
        client = self._client()
        try:
            await client.delete(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError("Redis delete failed", {"key": key, "error": str(e)})

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise CacheUnavailableError("Redis cache not started")
        return self.redis

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            await self._client().ping()
            return True
        except Exception:
            return False
