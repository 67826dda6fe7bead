"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timezone
from typing import AsyncGenerator

from grue.database.memory import LinkStoreMemory
from grue.service import LinkService
from grue.shortcode import ShortCodeGenerator
from grue.sweeper import ExpirySweeper
from grue.common.logging_config import setup_logging


FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock so expiry and sweeper windows are deterministic."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def test_store(logger) -> AsyncGenerator[LinkStoreMemory, None]:
    """Create in-memory store instance."""
    store = LinkStoreMemory(logger=logger)

    yield store

    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=5)


@pytest.fixture
def service(test_store, short_code_generator, logger, clock) -> LinkService:
    """Create service instance."""
    return LinkService(
        store=test_store,
        cache=None,  # No cache for tests
        short_code_generator=short_code_generator,
        logger=logger,
        base_url="http://testserver",
        clock=clock,
    )


@pytest.fixture
def sweeper(test_store, logger) -> ExpirySweeper:
    """Create sweeper with the default midnight, one-minute window."""
    return ExpirySweeper(store=test_store, logger=logger)


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def config():
    """Create test configuration."""
    from config import Config

    return Config(
        database_url="memory://",
        base_url="http://testserver",
    )


@pytest.fixture
def app(service, sweeper, config, clock):
    """Create test FastAPI app."""
    from web_app import create_app

    return create_app(
        service_instance=service,
        sweeper_instance=sweeper,
        config=config,
        clock=clock,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
