"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from .models import LinkRecord


class LinkStoreBase(ABC):
    """Abstract base class for link store operations.

    Implementations must make ``insert`` an atomic check-and-insert: two
    concurrent inserts of the same short code (or the same long URL) never
    both succeed. Every mutation is durable before the coroutine returns.
    Connectivity failures and timeouts surface as StoreUnavailableError.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Store connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def find_by_code(self, short_code: str) -> Optional[LinkRecord]:
        """Look up a record by short code (exact, case-sensitive).

        Args:
            short_code: The short code to lookup

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_long_url(self, long_url: str) -> Optional[LinkRecord]:
        """Look up a record by long URL (exact string match).

        Args:
            long_url: The original URL, compared without normalization

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, record: LinkRecord) -> LinkRecord:
        """Insert a new record.

        Args:
            record: The record to persist

        Returns:
            The stored record

        Raises:
            CollisionError: If the short code is already present
            DuplicateURLError: If the long URL is already present
        """
        pass

    @abstractmethod
    async def touch(
        self,
        short_code: str,
        visited_at: datetime,
        expires_at: Optional[datetime] = None,
    ) -> LinkRecord:
        """Record a visit.

        Args:
            short_code: The short code that was visited
            visited_at: New last-visit timestamp
            expires_at: New expiry; None keeps the stored expiry

        Returns:
            The updated record

        Raises:
            NotFoundError: If no record has this short code
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete every record whose expiry is before ``now``.

        Args:
            now: Reference time

        Returns:
            Number of deleted records
        """
        pass

    @abstractmethod
    async def claim_sweep(self, run_date: date, now: datetime) -> bool:
        """Atomically mark the sweep for ``run_date`` as started.

        Args:
            run_date: The UTC date of the sweeper window
            now: Time of the claim

        Returns:
            True if this caller claimed the window, False if it was taken
        """
        pass

    @abstractmethod
    async def release_sweep(self, run_date: date) -> None:
        """Drop the claim for ``run_date`` so a later poke in the window can retry."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
