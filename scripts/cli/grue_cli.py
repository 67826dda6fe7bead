#!/usr/bin/env python3
"""
Command-line interface for the Grue link store.

Usage:
    python grue_cli.py shorten <url>
    python grue_cli.py resolve <short_code>
    python grue_cli.py info <short_code>
    python grue_cli.py sweep [--force]
    python grue_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from datetime import datetime, timezone
from typing import Optional

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from app import build_components, start_components
from config import load_config
from grue.errors import ConfigurationError, GrueError
from grue.common.logging_config import setup_logging


def _emit(payload: dict, error: bool = False) -> int:
    print(json.dumps(payload, indent=2, default=str), file=sys.stderr if error else sys.stdout)
    return 1 if error else 0


class GrueCLI:
    """Command-line interface for Grue."""

    def __init__(self, db_url: Optional[str], redis_url: Optional[str] = None, verbose: bool = False):
        """Initialize CLI."""
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        overrides = {}
        if db_url:
            overrides["database_url"] = db_url
        if redis_url:
            overrides["redis_url"] = redis_url
        self.config = load_config(**overrides)
        self.store = None
        self.cache = None
        self.service = None
        self.sweeper = None

    async def initialize(self):
        """Initialize store, cache and service."""
        self.store, self.cache, self.service, self.sweeper = build_components(self.config, self.logger)
        await start_components(self.config, self.store, self.cache, self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    async def shorten(self, url: str):
        """Shorten a URL."""
        try:
            result = await self.service.shorten(url)
        except GrueError as e:
            return _emit({"success": False, "error": str(e)}, error=True)

        return _emit({
            "success": True,
            "short_code": result.short_code,
            "link": result.link,
            "redirect": result.long_url,
            "created": result.created,
            "expires_at": result.expires_at.isoformat() if result.expires_at else None,
        })

    async def resolve(self, short_code: str):
        """Resolve a short code, recording a visit."""
        try:
            long_url = await self.service.resolve(short_code)
        except GrueError as e:
            return _emit({"success": False, "error": str(e)}, error=True)

        if long_url is None:
            return _emit({"success": False, "error": f"Short code '{short_code}' not found"}, error=True)
        return _emit({"success": True, "short_code": short_code, "redirect": long_url})

    async def info(self, short_code: str):
        """Show a record without recording a visit."""
        try:
            record = await self.service.get_link(short_code)
        except GrueError as e:
            return _emit({"success": False, "error": str(e)}, error=True)

        if record is None:
            return _emit({"success": False, "error": f"Short code '{short_code}' not found"}, error=True)
        return _emit({"success": True, **record.to_dict()})

    async def sweep(self, force: bool = False):
        """Run the expiry sweep (only inside its window unless forced)."""
        now = datetime.now(timezone.utc)
        try:
            if force:
                result = await self.sweeper.run_now(now)
            else:
                result = await self.sweeper.run_if_due(now)
        except GrueError as e:
            return _emit({"success": False, "error": str(e)}, error=True)

        return _emit({"success": True, "ran": result.ran, "deleted": result.deleted})

    async def health(self):
        """Check store and cache health."""
        health_status = await self.service.health_check()
        return _emit({"success": health_status["overall"], "health": health_status}, error=not health_status["overall"])


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Grue CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Follow a short code (records a visit)
  %(prog)s resolve aB3_x

  # Inspect a short code
  %(prog)s info aB3_x

  # Delete expired links now
  %(prog)s sweep --force
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL"),
        help="Store connection URL (default: from DATABASE_URL env)"
    )

    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (optional, default: from REDIS_URL env)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code")
    resolve_parser.add_argument("short_code", help="Short code to resolve")

    info_parser = subparsers.add_parser("info", help="Show a short code's record")
    info_parser.add_argument("short_code", help="Short code to inspect")

    sweep_parser = subparsers.add_parser("sweep", help="Delete expired links")
    sweep_parser.add_argument("--force", action="store_true", help="Ignore the sweeper window")

    subparsers.add_parser("health", help="Check store health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        cli = GrueCLI(
            db_url=args.db_url,
            redis_url=args.redis_url,
            verbose=args.verbose,
        )
    except ConfigurationError as e:
        return _emit({"success": False, "error": str(e)}, error=True)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "resolve":
            return await cli.resolve(args.short_code)
        elif args.command == "info":
            return await cli.info(args.short_code)
        elif args.command == "sweep":
            return await cli.sweep(args.force)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
