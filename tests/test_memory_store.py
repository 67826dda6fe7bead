"""Tests for the in-memory link store."""

import asyncio
import pytest
from datetime import date, datetime, timedelta, timezone

from grue.database.models import LinkRecord
from grue.errors import CollisionError, DuplicateURLError, NotFoundError


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_record(code="abc12", url="https://example.com/a", expires_at=None) -> LinkRecord:
    return LinkRecord(
        long_url=url,
        short_code=code,
        created_at=NOW,
        last_visited_at=NOW,
        expires_at=expires_at,
    )


class TestLinkStoreMemory:
    """Test in-memory store operations."""

    @pytest.mark.asyncio
    async def test_insert_and_find(self, test_store):
        """Test lookups by code and by URL."""
        record = make_record()
        await test_store.insert(record)

        assert await test_store.find_by_code("abc12") == record
        assert await test_store.find_by_long_url("https://example.com/a") == record
        assert await test_store.find_by_code("zzzzz") is None
        assert await test_store.find_by_long_url("https://example.com/b") is None

    @pytest.mark.asyncio
    async def test_insert_collision(self, test_store):
        """Test duplicate short codes are rejected without overwriting."""
        await test_store.insert(make_record())

        with pytest.raises(CollisionError):
            await test_store.insert(make_record(url="https://example.com/b"))

        assert (await test_store.find_by_code("abc12")).long_url == "https://example.com/a"

    @pytest.mark.asyncio
    async def test_insert_duplicate_url(self, test_store):
        """Test a long URL can only be stored once."""
        await test_store.insert(make_record())

        with pytest.raises(DuplicateURLError):
            await test_store.insert(make_record(code="xyz98"))

    @pytest.mark.asyncio
    async def test_concurrent_inserts_same_code(self, test_store):
        """Test exactly one of many racing inserts wins a code."""
        records = [make_record(url=f"https://example.com/{i}") for i in range(10)]

        results = await asyncio.gather(
            *(test_store.insert(r) for r in records),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, LinkRecord)) == 1
        assert sum(1 for r in results if isinstance(r, CollisionError)) == 9

    @pytest.mark.asyncio
    async def test_touch(self, test_store):
        """Test touching updates last visit and optionally expiry."""
        await test_store.insert(make_record(expires_at=NOW + timedelta(days=30)))
        later = NOW + timedelta(hours=1)

        updated = await test_store.touch("abc12", later)
        assert updated.last_visited_at == later
        assert updated.expires_at == NOW + timedelta(days=30)

        updated = await test_store.touch("abc12", later, later + timedelta(days=30))
        assert updated.expires_at == later + timedelta(days=30)
        assert (await test_store.find_by_code("abc12")).expires_at == later + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_touch_missing(self, test_store):
        """Test touching an unknown code."""
        with pytest.raises(NotFoundError):
            await test_store.touch("zzzzz", NOW)

    @pytest.mark.asyncio
    async def test_delete_expired(self, test_store):
        """Test only records strictly past expiry are deleted."""
        await test_store.insert(make_record("exp01", "https://example.com/1", NOW - timedelta(seconds=1)))
        await test_store.insert(make_record("edge1", "https://example.com/2", NOW))
        await test_store.insert(make_record("none1", "https://example.com/3", None))

        assert await test_store.delete_expired(NOW) == 1
        assert await test_store.count() == 2
        assert await test_store.delete_expired(NOW) == 0

    @pytest.mark.asyncio
    async def test_claim_sweep(self, test_store):
        """Test a window can be claimed once."""
        assert await test_store.claim_sweep(date(2024, 3, 1), NOW)
        assert not await test_store.claim_sweep(date(2024, 3, 1), NOW)
        assert await test_store.claim_sweep(date(2024, 3, 2), NOW)

    @pytest.mark.asyncio
    async def test_health_check(self, test_store):
        """Test health check."""
        assert await test_store.health_check()

    @pytest.mark.asyncio
    async def test_release_sweep(self, test_store):
        """Test a released window can be claimed again."""
        assert await test_store.claim_sweep(date(2024, 3, 1), NOW)
        await test_store.release_sweep(date(2024, 3, 1))

        assert await test_store.claim_sweep(date(2024, 3, 1), NOW)
