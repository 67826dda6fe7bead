"""Redis cache for short code lookups."""

import logging
from typing import Optional

import redis.asyncio as redis


class RedisCache:
    """Redis cache mapping short codes to long URLs.

    Only used on the redirect path. A cached entry is never trusted on its
    own: the service still touches the record in the store, and evicts the
    entry when the store reports the code as gone.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
        prefix: str = "grue:links",
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: Default TTL for cached items
            logger: Optional logger instance
            prefix: Namespace for cache keys
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if redis_url:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except redis.RedisError as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    async def get(self, short_code: str) -> Optional[str]:
        """Get cached long URL.

        Args:
            short_code: The short code

        Returns:
            Cached long URL or None
        """
        if not self.enabled or not self.client:
            return None

        try:
            return await self.client.get(self.get_cache_key(short_code))
        except redis.RedisError as e:
            self.logger.error(f"Cache get error for {short_code}: {e}")
            return None

    async def set(
        self,
        short_code: str,
        long_url: str,
        ttl: Optional[int] = None,
    ) -> bool:
        """Cache a long URL.

        Args:
            short_code: The short code
            long_url: Value to cache
            ttl: Optional TTL override (seconds)

        Returns:
            True if successful
        """
        if not self.enabled or not self.client:
            return False

        try:
            ttl = ttl or self.ttl_seconds
            await self.client.setex(self.get_cache_key(short_code), ttl, long_url)
            return True
        except redis.RedisError as e:
            self.logger.error(f"Cache set error for {short_code}: {e}")
            return False

    async def delete(self, short_code: str) -> bool:
        """Evict a short code.

        Args:
            short_code: The short code

        Returns:
            True if deleted
        """
        if not self.enabled or not self.client:
            return False

        try:
            result = await self.client.delete(self.get_cache_key(short_code))
            return result > 0
        except redis.RedisError as e:
            self.logger.error(f"Cache delete error for {short_code}: {e}")
            return False

    async def ping(self) -> bool:
        if not self.enabled or not self.client:
            return True
        try:
            return bool(await self.client.ping())
        except redis.RedisError as e:
            self.logger.error(f"Cache ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")

    def get_cache_key(self, short_code: str) -> str:
        return f"{self.prefix}:{short_code}"
