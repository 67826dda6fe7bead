"""Business logic service for Grue."""

import logging
from dataclasses import dataclass
from typing import Optional, Dict
from datetime import datetime, timedelta, timezone

from .shortcode import ShortCodeGenerator
from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .database.models import LinkRecord
from .common.validators import is_valid_url
from .common.url_builder import build_short_url
from .common.headers import DEFAULT_BASE_URL
from .errors import (
    CollisionError,
    DuplicateURLError,
    GenerationExhaustedError,
    GrueError,
    NotFoundError,
    ValidationError,
)
from .expiry import ExpiryPolicy, DEFAULT_RETENTION_DAYS, initial_expiry, refreshed_expiry


@dataclass(frozen=True)
class ShortenResult:
    short_code: str
    link: str
    long_url: str
    created_at: datetime
    expires_at: Optional[datetime]
    created: bool


class LinkService:
    """Service layer for link shortening and resolution."""

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        base_url: str = DEFAULT_BASE_URL,
        expiry_policy: ExpiryPolicy = ExpiryPolicy.FIXED,
        retention: timedelta = timedelta(days=DEFAULT_RETENTION_DAYS),
        max_collision_retries: int = 5,
        clock=None,
    ):
        """Initialize link service.

        Args:
            store: Link store instance
            cache: Optional redirect cache
            short_code_generator: Optional short code generator
            logger: Optional logger
            base_url: Domain prefix for full short links
            expiry_policy: How expires_at is set and refreshed
            retention: Retention window added to creation/visit time
            max_collision_retries: Insert attempts before giving up
            clock: Callable returning the current UTC datetime
        """
        self.store = store
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = base_url
        self.expiry_policy = expiry_policy
        self.retention = retention
        self.max_collision_retries = max_collision_retries
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def shorten(self, long_url: str, base_url: Optional[str] = None) -> ShortenResult:
        """Get or create the short link for a long URL.

        Args:
            long_url: The original long URL
            base_url: Domain prefix overriding the configured one

        Returns:
            ShortenResult; ``created`` is False when an existing link was reused

        Raises:
            ValidationError: If the URL is empty or malformed
            GenerationExhaustedError: If every generated code collided
            StoreUnavailableError: If the store cannot be reached
        """
        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            raise ValidationError(f"Invalid URL: {error}")

        base_url = base_url or self.base_url

        existing = await self.store.find_by_long_url(long_url)
        if existing is not None:
            self.logger.debug(f"Reusing short code {existing.short_code} for {long_url}")
            return self._result(existing, base_url, created=False)

        for attempt in range(1, self.max_collision_retries + 1):
            now = self.clock()
            record = LinkRecord(
                long_url=long_url,
                short_code=self.generator.generate(),
                created_at=now,
                last_visited_at=now,
                expires_at=initial_expiry(self.expiry_policy, now, self.retention),
            )
            try:
                await self.store.insert(record)
            except CollisionError:
                self.logger.warning(
                    f"Short code collision on attempt {attempt}/{self.max_collision_retries}: {record.short_code}"
                )
                continue
            except DuplicateURLError:
                # A concurrent request shortened the same URL first
                existing = await self.store.find_by_long_url(long_url)
                if existing is None:
                    continue
                return self._result(existing, base_url, created=False)

            self.logger.info(f"Created short link: {record.short_code} -> {long_url}")
            return self._result(record, base_url, created=True)

        self.logger.error(f"Unable to generate a free short code for {long_url} after {self.max_collision_retries} attempts")
        raise GenerationExhaustedError(
            f"Unable to generate unique short code after {self.max_collision_retries} attempts"
        )

    async def resolve(self, short_code: str) -> Optional[str]:
        """Get the long URL for a short code and record the visit.

        The visit is recorded best-effort: store failures while touching are
        logged and the redirect still succeeds.

        Args:
            short_code: The short code to lookup

        Returns:
            Long URL or None if not found

        Raises:
            StoreUnavailableError: If the lookup itself cannot reach the store
        """
        long_url = await self.cache.get(short_code) if self.cache else None
        record = None

        if long_url is None:
            record = await self.store.find_by_code(short_code)
            if record is None:
                self.logger.debug(f"Short code not found: {short_code}")
                return None
            long_url = record.long_url
            if self.cache:
                await self.cache.set(short_code, long_url)
        else:
            self.logger.debug(f"Cache hit for {short_code}")

        visited_at = self.clock()
        try:
            await self.store.touch(
                short_code,
                visited_at,
                refreshed_expiry(
                    self.expiry_policy,
                    record.expires_at if record else None,
                    visited_at,
                    self.retention,
                ),
            )
        except NotFoundError:
            # Swept between lookup and touch
            self.logger.info(f"Short code {short_code} disappeared while resolving")
            if self.cache:
                await self.cache.delete(short_code)
            return None
        except GrueError as e:
            self.logger.warning(f"Failed to record visit for {short_code}: {e}")

        return long_url

    async def get_link(self, short_code: str) -> Optional[LinkRecord]:
        """Get a record without recording a visit."""
        return await self.store.find_by_code(short_code)

    def short_link(self, short_code: str, base_url: Optional[str] = None) -> str:
        return build_short_url(short_code, base_url or self.base_url)

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        store_healthy = await self.store.health_check()
        cache_healthy = await self.cache.ping() if self.cache else True

        return {
            "database": store_healthy,
            "cache": cache_healthy,
            "overall": store_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()

    def _result(self, record: LinkRecord, base_url: str, created: bool) -> ShortenResult:
        return ShortenResult(
            short_code=record.short_code,
            link=build_short_url(record.short_code, base_url),
            long_url=record.long_url,
            created_at=record.created_at,
            expires_at=record.expires_at,
            created=created,
        )
