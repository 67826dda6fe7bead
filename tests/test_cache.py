"""Tests for the Redis cache (client mocked)."""

import pytest
from unittest.mock import AsyncMock

import redis.asyncio as redis

from grue.database.cache import RedisCache


@pytest.fixture
def client():
    client = AsyncMock()
    client.get.return_value = None
    client.delete.return_value = 1
    client.ping.return_value = True
    return client


@pytest.fixture
def cache(client, logger):
    cache = RedisCache(redis_url="redis://localhost:6379/0", ttl_seconds=60, logger=logger)
    cache.client = client
    return cache


class TestRedisCache:
    """Test cache operations."""

    @pytest.mark.asyncio
    async def test_disabled(self, logger):
        """Test a cache without URL is a no-op."""
        cache = RedisCache(logger=logger)
        await cache.connect()

        assert await cache.get("abc12") is None
        assert not await cache.set("abc12", "https://example.com")
        assert await cache.ping()

    @pytest.mark.asyncio
    async def test_get(self, cache, client):
        """Test key naming on get."""
        client.get.return_value = "https://example.com"

        assert await cache.get("abc12") == "https://example.com"
        client.get.assert_awaited_once_with("grue:links:abc12")

    @pytest.mark.asyncio
    async def test_set_default_ttl(self, cache, client):
        """Test set uses the default TTL."""
        assert await cache.set("abc12", "https://example.com")
        client.setex.assert_awaited_once_with("grue:links:abc12", 60, "https://example.com")

    @pytest.mark.asyncio
    async def test_delete(self, cache, client):
        """Test eviction."""
        assert await cache.delete("abc12")
        client.delete.assert_awaited_once_with("grue:links:abc12")

    @pytest.mark.asyncio
    async def test_errors_are_misses(self, cache, client):
        """Test Redis failures degrade to cache misses."""
        client.get.side_effect = redis.RedisError("down")
        client.setex.side_effect = redis.RedisError("down")
        client.ping.side_effect = redis.RedisError("down")

        assert await cache.get("abc12") is None
        assert not await cache.set("abc12", "https://example.com")
        assert not await cache.ping()

    @pytest.mark.asyncio
    async def test_close(self, cache, client):
        """Test closing the client."""
        await cache.close()
        client.aclose.assert_awaited_once()
