"""Session-scoped cache for the mood history aggregate.

One ``HistoryCache`` exists per logged-in user. It is created on login and
closed on logout by the application context; nothing else writes to it.

States:

- fresh: ``now - fetched_at < ttl`` and no pending invalidation; served without I/O.
- stale: TTL elapsed or ``invalidate()`` was called; the next read fetches.
- fetching: one fetch is in flight; concurrent readers wait for its result.

A failed fetch leaves the previous aggregate and ``fetched_at`` in place so
callers can keep showing stale data via ``peek()``.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Protocol

from ..logging_config import get_logger
from .dates import day_window
from .history import WEEKLY_WINDOW_DAYS, HistoryAggregate, MoodRecord, build_history_aggregate

logger = get_logger(__name__)

DEFAULT_TTL = timedelta(minutes=5)
DEFAULT_TIMELINE_DAYS = 30


class MoodRecordSource(Protocol):
    """Read side of the journal store used by the cache."""

    def query_mood_records_in_range(
        self, start_date: date, end_date: date, *, user_id: int
    ) -> list[MoodRecord]:  # pragma: no cover - interface
        ...


class HistoryFetchError(RuntimeError):
    """Raised when the underlying range queries fail."""


class HistoryCache:
    """TTL cache around the two history range queries for one user."""

    def __init__(
        self,
        source: MoodRecordSource,
        *,
        user_id: int,
        ttl: timedelta = DEFAULT_TTL,
        timeline_days: int = DEFAULT_TIMELINE_DAYS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("Cache TTL must be positive")
        if timeline_days <= 0:
            raise ValueError("Timeline window must cover at least one day")
        self.source = source
        self.user_id = user_id
        self.ttl = ttl
        self.timeline_days = timeline_days
        self._clock = clock

        self._lock = threading.Lock()
        self._pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="habitlens-history")
        self._aggregate: Optional[HistoryAggregate] = None
        self._fetched_at: Optional[datetime] = None
        self._needs_refresh = False
        self._in_flight: Optional[Future] = None
        # Bumped by invalidate()/close() so a fetch can tell it was overtaken
        self._generation = 0
        self._closed = False
        self.fetch_count = 0

    # ------------------------------------------------------------------ state
    @property
    def fetched_at(self) -> Optional[datetime]:
        return self._fetched_at

    @property
    def needs_refresh(self) -> bool:
        return self._needs_refresh

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> str:
        """One of ``empty``, ``fresh``, ``stale`` or ``fetching``."""
        with self._lock:
            if self._in_flight is not None:
                return "fetching"
            if self._is_fresh(self._clock()):
                return "fresh"
            return "stale" if self._aggregate is not None else "empty"

    def _is_fresh(self, now: datetime) -> bool:
        return (
            self._aggregate is not None
            and self._fetched_at is not None
            and not self._needs_refresh
            and now - self._fetched_at < self.ttl
        )

    # ------------------------------------------------------------- operations
    def peek(self, now: datetime | None = None) -> Optional[HistoryAggregate]:
        """Return the cached aggregate without I/O, flagged stale when it is."""
        now = now or self._clock()
        with self._lock:
            if self._aggregate is None:
                return None
            if self._is_fresh(now):
                return self._aggregate
            return replace(self._aggregate, is_stale=True)

    def invalidate(self) -> None:
        """Force the next read to fetch, regardless of TTL."""
        with self._lock:
            self._fetched_at = None
            self._needs_refresh = True
            self._generation += 1
        logger.debug("History cache invalidated", extra={"user_id": self.user_id})

    def get_or_fetch(self, now: datetime | None = None) -> HistoryAggregate:
        """Return the cached aggregate, fetching when it is stale or missing."""
        now = now or self._clock()
        with self._lock:
            if self._closed:
                raise RuntimeError("History cache is closed")
            if self._is_fresh(now):
                logger.debug("History cache hit", extra={"user_id": self.user_id})
                return self._aggregate  # type: ignore[return-value]
            pending = self._in_flight
            if pending is None:
                pending = self._in_flight = Future()
                generation = self._generation
                owner = True
            else:
                owner = False

        if not owner:
            logger.debug("Joining in-flight history fetch", extra={"user_id": self.user_id})
            return pending.result()

        try:
            aggregate = self._fetch(now)
        except BaseException as exc:
            with self._lock:
                self._in_flight = None
            pending.set_exception(exc)
            raise

        with self._lock:
            self._in_flight = None
            if self._closed:
                logger.info("Discarding history result after close", extra={"user_id": self.user_id})
            elif generation != self._generation:
                # A write landed mid-fetch; keep the data but stay due for refresh.
                self._aggregate = aggregate
                aggregate = replace(aggregate, is_stale=True)
            else:
                self._aggregate = aggregate
                self._fetched_at = now
                self._needs_refresh = False
        pending.set_result(aggregate)
        return aggregate

    def _fetch(self, now: datetime) -> HistoryAggregate:
        today = now.date()
        weekly_start = day_window(today, WEEKLY_WINDOW_DAYS)[0]
        timeline_start = day_window(today, self.timeline_days)[0]
        logger.info(
            "Fetching history",
            extra={"user_id": self.user_id, "weekly_start": weekly_start, "timeline_start": timeline_start},
        )
        try:
            weekly_job = self._pool.submit(
                self.source.query_mood_records_in_range, weekly_start, today, user_id=self.user_id
            )
            timeline_job = self._pool.submit(
                self.source.query_mood_records_in_range, timeline_start, today, user_id=self.user_id
            )
            weekly_records = weekly_job.result()
            timeline_records = timeline_job.result()
        except Exception as exc:
            logger.exception("History fetch failed", extra={"user_id": self.user_id})
            raise HistoryFetchError(f"Failed to fetch history for user {self.user_id}") from exc
        finally:
            with self._lock:
                self.fetch_count += 1

        return build_history_aggregate(
            weekly_records,
            timeline_records,
            today=today,
            fetched_at=now,
            timeline_days=self.timeline_days,
        )

    def close(self) -> None:
        """Drop cached state; results of fetches still in flight are discarded."""
        with self._lock:
            self._closed = True
            self._generation += 1
            self._aggregate = None
            self._fetched_at = None
            self._needs_refresh = False
        self._pool.shutdown(wait=False)
        logger.debug("History cache closed", extra={"user_id": self.user_id})


__all__ = ["DEFAULT_TTL", "HistoryCache", "HistoryFetchError", "MoodRecordSource"]
