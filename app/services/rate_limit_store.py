"""Request counters backing the rate limit middleware."""

import logging
import time
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from app.models import RateLimitCounter

logger = logging.getLogger(__name__)


class RateLimitStore(Protocol):
    window: float
    # True when check_and_record does blocking I/O and must run off the event loop
    blocking: bool

    def check_and_record(self, key: str, limit: int) -> tuple[bool, int]:
        """Return (allowed, retry_after_seconds) and count the hit if allowed."""
        ...


class SlidingWindowCounter:
    """Tracks per-key hit timestamps within a sliding time window.

    State is local to this process; use DatabaseWindowCounter when several
    instances must share a limit. Stale keys are pruned periodically to
    bound memory usage.
    """

    blocking = False

    def __init__(self, window: float = 60.0, cleanup_interval: float = 60.0) -> None:
        self.window = window
        self._buckets: dict[str, list[float]] = {}
        self._last_cleanup = time.monotonic()
        self._cleanup_interval = cleanup_interval

    def _cleanup_stale(self, now: float) -> None:
        if now - self._last_cleanup < self._cleanup_interval:
            return
        self._last_cleanup = now
        cutoff = now - self.window
        for key in list(self._buckets):
            self._buckets[key] = [t for t in self._buckets[key] if t > cutoff]
            if not self._buckets[key]:
                del self._buckets[key]

    def count(self, key: str) -> int:
        """Return the number of hits for *key* within the current window."""
        cutoff = time.monotonic() - self.window
        return sum(1 for t in self._buckets.get(key, []) if t > cutoff)

    def check_and_record(self, key: str, limit: int) -> tuple[bool, int]:
        now = time.monotonic()
        self._cleanup_stale(now)
        cutoff = now - self.window

        timestamps = [t for t in self._buckets.get(key, []) if t > cutoff]
        self._buckets[key] = timestamps

        if len(timestamps) >= limit:
            retry_after = int(timestamps[0] - cutoff) + 1
            return False, max(retry_after, 1)

        timestamps.append(now)
        return True, 0


class DatabaseWindowCounter:
    """Fixed-window counter stored in ``rate_limit_counters``.

    Every API instance increments the same row for a (key, window) pair, so the
    limit holds across a multi-instance deployment. Each check opens a session
    and commits, so the middleware runs it in the threadpool.
    """

    blocking = True

    def __init__(self, session_factory: sessionmaker, window: int = 60) -> None:
        self.session_factory = session_factory
        self.window = window
        self._last_cleanup = 0

    def _increment(self, db: Session, key: str, window_start: int) -> int:
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise NotImplementedError(f"Rate limit counters not supported for dialect {dialect}")

        table = RateLimitCounter.__table__
        stmt = insert(table).values(key=key, window_start=window_start, count=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=["key", "window_start"],
            set_={"count": table.c.count + 1},
        )
        db.execute(stmt)
        return db.execute(
            select(RateLimitCounter.count).where(
                RateLimitCounter.key == key,
                RateLimitCounter.window_start == window_start,
            )
        ).scalar_one()

    def _cleanup_stale(self, db: Session, window_start: int) -> None:
        if window_start <= self._last_cleanup:
            return
        self._last_cleanup = window_start
        db.execute(delete(RateLimitCounter).where(RateLimitCounter.window_start < window_start))

    def check_and_record(self, key: str, limit: int) -> tuple[bool, int]:
        now = time.time()
        window_start = int(now // self.window) * self.window
        with self.session_factory() as db:
            self._cleanup_stale(db, window_start)
            count = self._increment(db, key, window_start)
            db.commit()

        if count > limit:
            retry_after = int(window_start + self.window - now) + 1
            return False, max(retry_after, 1)
        return True, 0
