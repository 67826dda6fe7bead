"""Expiry sweeper for Grue.

The sweeper is meant to be poked frequently (every minute, by an external
scheduler hitting ``/worker/clean/database``) but only scans the store once a
day, inside a configured time-of-day window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from .database.base import LinkStoreBase
from .errors import GrueError
from .expiry import ensure_utc


MINUTES_PER_DAY = 24 * 60


def to_utc_time(value: time) -> time:
    """Naive UTC time-of-day; an offset-aware value is shifted to UTC."""
    if value.utcoffset() is None:
        return value.replace(tzinfo=None)
    anchored = datetime.combine(date(2000, 1, 1), value)
    return anchored.astimezone(timezone.utc).time()


@dataclass(frozen=True)
class SweepResult:
    ran: bool
    deleted: int = 0
    window: Optional[date] = None


class ExpirySweeper:
    """Delete expired links at most once per daily window.

    Last-run tracking happens at two levels: ``last_run_date`` skips repeat
    invocations in this process, and ``LinkStoreBase.claim_sweep`` makes the
    claim atomic across every worker sharing the store.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        trigger_time: time = time(0, 0),
        window_minutes: int = 1,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize sweeper.

        Args:
            store: Link store to prune
            trigger_time: Time-of-day at which the window opens (UTC unless it carries an offset)
            window_minutes: Window length; 1 means matched to the minute
            logger: Optional logger
        """
        if not 1 <= window_minutes <= MINUTES_PER_DAY:
            raise ValueError("window_minutes must be between 1 and 1440")

        self.store = store
        self.trigger_time = to_utc_time(trigger_time).replace(second=0, microsecond=0)
        self.window_minutes = window_minutes
        self.logger = logger or logging.getLogger(__name__)
        self.last_run_date: Optional[date] = None

    def window_for(self, now: datetime) -> Optional[date]:
        """Date of the window containing ``now``, or None when outside it.

        A window that starts before midnight and runs past it belongs to the
        date on which it opened.
        """
        now = ensure_utc(now)
        start = self.trigger_time.hour * 60 + self.trigger_time.minute
        current = now.hour * 60 + now.minute
        offset = (current - start) % MINUTES_PER_DAY
        if offset >= self.window_minutes:
            return None
        run_date = now.date()
        if current < start:
            run_date -= timedelta(days=1)
        return run_date

    async def run_if_due(self, now: datetime) -> SweepResult:
        """Sweep when ``now`` is inside an unswept window, otherwise skip.

        Args:
            now: Current time (naive values are treated as UTC)

        Returns:
            SweepResult with ran=False when skipped
        """
        now = ensure_utc(now)
        run_date = self.window_for(now)
        if run_date is None:
            self.logger.debug(f"Sweep skipped at {now.isoformat()}: outside window")
            return SweepResult(ran=False)

        if self.last_run_date == run_date:
            self.logger.debug(f"Sweep skipped: window {run_date} already ran in this process")
            return SweepResult(ran=False, window=run_date)

        if not await self.store.claim_sweep(run_date, now):
            self.last_run_date = run_date
            self.logger.debug(f"Sweep skipped: window {run_date} already claimed")
            return SweepResult(ran=False, window=run_date)

        self.last_run_date = run_date
        try:
            result = await self.run_now(now)
        except Exception:
            # Reopen the window so a later poke can retry once the store is back
            self.last_run_date = None
            await self._release(run_date)
            raise
        return SweepResult(ran=True, deleted=result.deleted, window=run_date)

    async def _release(self, run_date: date) -> None:
        try:
            await self.store.release_sweep(run_date)
        except GrueError as e:
            self.logger.error(f"Could not release sweep claim for {run_date}: {e}")

    async def run_now(self, now: datetime) -> SweepResult:
        """Delete expired links immediately, ignoring the window."""
        now = ensure_utc(now)
        deleted = await self.store.delete_expired(now)
        self.logger.info(f"Expiry sweep removed {deleted} links")
        return SweepResult(ran=True, deleted=deleted)
