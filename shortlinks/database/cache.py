"""Redis lookup cache for resolved links."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..common.logging_config import get_logger


class RedisCache:
    """Redis cache for ID -> long URL mappings.

    Links are never modified, so a cached entry can only go stale by
    expiring. Every Redis failure degrades to a cache miss.
    """

    KEY_PREFIX = "shortlinks:link:"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
        client: Optional[redis.Redis] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: TTL for cached entries
            logger: Optional logger instance
            client: Already constructed client, used instead of redis_url
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or get_logger(__name__)
        self.client = client
        self.enabled = client is not None or redis_url is not None

        if self.enabled:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis, disabling the cache if it is unreachable."""
        if not self.enabled:
            return

        try:
            if self.client is None:
                self.client = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    def get_cache_key(self, link_id: int) -> str:
        """Generate cache key for a link ID."""
        return f"{self.KEY_PREFIX}{link_id}"

    async def get(self, link_id: int) -> Optional[str]:
        """Get a cached long URL.

        Returns:
            Cached URL or None
        """
        if not self.enabled or not self.client:
            return None

        try:
            return await self.client.get(self.get_cache_key(link_id))
        except RedisError as e:
            self.logger.warning(f"Cache get error: {e}")
            return None

    async def set(self, link_id: int, long_url: str) -> bool:
        """Cache a long URL.

        Returns:
            True if successful
        """
        if not self.enabled or not self.client:
            return False

        try:
            await self.client.setex(self.get_cache_key(link_id), self.ttl_seconds, long_url)
            return True
        except RedisError as e:
            self.logger.warning(f"Cache set error: {e}")
            return False

    async def ping(self) -> bool:
        """Check the Redis connection."""
        if not self.enabled or not self.client:
            return False

        try:
            return bool(await self.client.ping())
        except RedisError as e:
            self.logger.error(f"Cache ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")
