"""Concurrency tests for the HTTP surface.

Many simultaneous shorten requests must never hand out one short code for two
URLs, and racing requests for the same URL must agree on one record.
"""

import asyncio
import pytest


async def gather_ok(requests, status_code=200):
    """Run requests together and return them, failing on any error or bad status."""
    responses = await asyncio.gather(*requests, return_exceptions=True)
    for i, r in enumerate(responses):
        if isinstance(r, Exception):
            pytest.fail(f"Request {i} raised: {r!r}")
        assert r.status_code == status_code, f"Request {i}: {r.status_code} {r.text}"
    return responses


def code_of(response) -> str:
    return response.json()["link"].rsplit("/", 1)[1]


@pytest.mark.asyncio
class TestConcurrentRequests:
    """Simultaneous requests against one app."""

    async def test_health(self, client):
        """Concurrent health checks all report healthy."""
        responses = await gather_ok([client.get("/api/health") for _ in range(50)])

        assert {r.json()["status"] for r in responses} == {"healthy"}

    async def test_distinct_urls_get_distinct_codes(self, client, service):
        """Concurrent shortens of different URLs never share a code."""
        urls = [f"https://example.com/page_{i}" for i in range(30)]

        responses = await gather_ok(
            [client.post("/api/generate", json={"grue-link": url}) for url in urls]
        )

        assert [r.json()["redirect"] for r in responses] == urls
        assert len({code_of(r) for r in responses}) == len(urls)
        assert await service.store.count() == len(urls)

    async def test_same_url_gets_one_code(self, client, service):
        """Concurrent shortens of one URL agree on a single record."""
        url = "https://example.com/popular"

        responses = await gather_ok(
            [client.post("/api/generate", json={"grue-link": url}) for _ in range(20)]
        )

        assert len({code_of(r) for r in responses}) == 1
        assert await service.store.count() == 1

    async def test_redirects(self, client):
        """Concurrent visits to one code all redirect."""
        created = await client.post(
            "/api/generate",
            json={"grue-link": "https://example.com/redirect-target"},
        )
        short_code = code_of(created)

        responses = await gather_ok(
            [client.get(f"/{short_code}", follow_redirects=False) for _ in range(20)],
            status_code=302,
        )

        assert {r.headers["location"] for r in responses} == {"https://example.com/redirect-target"}
