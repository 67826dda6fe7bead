#!/usr/bin/env python3
"""
Main entry point for the Grue link shortener service.

Concurrency: The server handles multiple connections simultaneously via async I/O
(FastAPI + asyncpg connection pool + redis.asyncio). Set WORKERS > 1 for
multi-process scaling across CPU cores (each worker has its own store pool).

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Store connection string (required)
    DATABASE_NAME - Database name override
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Public domain prefix for short links
    EXPIRY_POLICY - none, fixed or sliding
    SWEEPER_TIME - UTC time-of-day of the daily expiry sweep
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from grue.database import RedisCache, create_link_store
from grue.database.postgres import LinkStorePostgres
from grue.errors import ConfigurationError
from grue.service import LinkService
from grue.shortcode import ShortCodeGenerator
from grue.sweeper import ExpirySweeper
from grue.common.logging_config import setup_logging
from grue.common.headers import DEFAULT_BASE_URL
from web_app import create_app


def build_components(config: Config, logger: logging.Logger):
    """Create store, cache, service and sweeper from configuration.

    Nothing connects here: the store pool opens on first use and the cache
    connects in ``start_components``.
    """
    store = create_link_store(
        database_url=config.database_url,
        database_name=config.database_name,
        pool_max_size=config.database_pool_max_size,
        timeout_seconds=config.database_timeout_seconds,
        logger=logger,
    )

    cache = None
    if config.redis_url:
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
    else:
        logger.info("Redis caching disabled")

    service = LinkService(
        store=store,
        cache=cache,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        base_url=config.base_url or DEFAULT_BASE_URL,
        expiry_policy=config.expiry_policy,
        retention=config.retention,
        max_collision_retries=config.max_collision_retries,
    )

    sweeper = ExpirySweeper(
        store=store,
        trigger_time=config.sweeper_time,
        window_minutes=config.sweeper_window_minutes,
        logger=logger,
    )

    return store, cache, service, sweeper


async def start_components(config: Config, store, cache, logger: logging.Logger) -> None:
    if config.database_create_tables and isinstance(store, LinkStorePostgres):
        await store.create_tables()
    if cache is not None:
        await cache.connect()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting Grue link service...")

    store, cache, service, sweeper = build_components(config, logger)
    await start_components(config, store, cache, logger)

    app.state.store = store
    app.state.cache = cache
    app.state.service = service
    app.state.sweeper = sweeper

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down Grue link service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        # No usable store configuration: nothing to serve
        logging.basicConfig(level=logging.ERROR)
        logging.getLogger("grue").error(str(e))
        sys.exit(1)

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Grue Link Shortener")
    logger.info(f"Configuration: {config.public_dump()}")

    # Components are created in the lifespan so each worker owns its pool
    app = create_app(
        service_instance=None,
        sweeper_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    # Configure uvicorn: async handles many concurrent connections per worker;
    # workers > 1 runs multiple processes for CPU scaling (each has its own store pool).
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    # Setup signal handlers for graceful shutdown
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
