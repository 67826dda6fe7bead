#!/usr/bin/env python3
"""
Manually create the Grue tables in PostgreSQL.

Usage:
    python init_database.py --db-url postgresql://postgres@localhost:5432/grue
"""

import argparse
import asyncio
import sys
import os

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from grue.database.postgres import LinkStorePostgres
from grue.errors import StoreUnavailableError
from grue.common.logging_config import setup_logging


async def main():
    parser = argparse.ArgumentParser(description="Initialize Grue tables")
    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "postgresql://postgres@localhost:5432/grue"),
        help="PostgreSQL connection URL"
    )
    parser.add_argument(
        "--db-name",
        default=os.getenv("DATABASE_NAME"),
        help="Database name override"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")

    store = LinkStorePostgres(
        db_config=args.db_url,
        database_name=args.db_name,
        logger=logger,
    )

    try:
        logger.info("Initializing database tables...")
        await store.create_tables()
        logger.info("Tables initialized successfully")

        if not await store.health_check():
            logger.error("Database health check failed")
            return 1

        logger.info("Done")
        return 0

    except StoreUnavailableError as e:
        logger.error(f"Error initializing tables: {e}")
        return 1
    finally:
        await store.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
