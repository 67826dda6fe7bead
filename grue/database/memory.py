"""In-memory implementation of the link store.

Intended for local development (DATABASE_URL=memory://) and tests. Data lives
for the lifetime of the process only.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Optional, Dict, Set

from .base import LinkStoreBase
from .models import LinkRecord
from grue.errors import CollisionError, DuplicateURLError, NotFoundError
from grue.expiry import ensure_utc, is_expired


class LinkStoreMemory(LinkStoreBase):
    """Dictionary-backed link store guarded by an asyncio lock."""

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._by_code: Dict[str, LinkRecord] = {}
        self._code_by_url: Dict[str, str] = {}
        self._swept_dates: Set[date] = set()
        self._lock = asyncio.Lock()

    async def find_by_code(self, short_code: str) -> Optional[LinkRecord]:
        return self._by_code.get(short_code)

    async def find_by_long_url(self, long_url: str) -> Optional[LinkRecord]:
        code = self._code_by_url.get(long_url)
        return self._by_code.get(code) if code is not None else None

    async def insert(self, record: LinkRecord) -> LinkRecord:
        async with self._lock:
            if record.short_code in self._by_code:
                self.logger.warning(f"Short code already exists: {record.short_code}")
                raise CollisionError(f"Short code '{record.short_code}' already exists")
            if record.long_url in self._code_by_url:
                raise DuplicateURLError(f"Long URL already shortened: {record.long_url}")
            self._by_code[record.short_code] = record
            self._code_by_url[record.long_url] = record.short_code
        return record

    async def touch(
        self,
        short_code: str,
        visited_at: datetime,
        expires_at: Optional[datetime] = None,
    ) -> LinkRecord:
        async with self._lock:
            record = self._by_code.get(short_code)
            if record is None:
                raise NotFoundError(f"Short code '{short_code}' not found")
            updated = record.touched(
                ensure_utc(visited_at),
                ensure_utc(expires_at) if expires_at is not None else record.expires_at,
            )
            self._by_code[short_code] = updated
        return updated

    async def delete_expired(self, now: datetime) -> int:
        async with self._lock:
            expired = [code for code, record in self._by_code.items() if is_expired(record.expires_at, now)]
            for code in expired:
                record = self._by_code.pop(code)
                self._code_by_url.pop(record.long_url, None)
        self.logger.debug(f"Deleted {len(expired)} expired short links")
        return len(expired)

    async def claim_sweep(self, run_date: date, now: datetime) -> bool:
        async with self._lock:
            if run_date in self._swept_dates:
                return False
            self._swept_dates.add(run_date)
        return True

    async def release_sweep(self, run_date: date) -> None:
        async with self._lock:
            self._swept_dates.discard(run_date)

    async def count(self) -> int:
        """Number of stored records."""
        return len(self._by_code)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self._by_code.clear()
        self._code_by_url.clear()
        self._swept_dates.clear()
