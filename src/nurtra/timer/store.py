"""Persistence interfaces for the session timer."""

import threading
from datetime import datetime
from itertools import count
from typing import Protocol, runtime_checkable

from .models import BingeFreePeriod, TimerRecord


@runtime_checkable
class TimerStore(Protocol):
    """Durable per-user timer record.

    Every operation requires an authenticated user and raises
    NotAuthenticatedError without one.
    """

    def save_start(self, start_time: datetime) -> None:
        """Record a running timer: start set, running true, stop cleared."""
        ...

    def save_stop(self, stop_time: datetime) -> None:
        """Record a stopped timer: running false, stop set."""
        ...

    def clear(self) -> None:
        """Remove start and stop, set running false."""
        ...

    def fetch(self) -> TimerRecord | None:
        """Return the stored record, or None when there is none."""
        ...


@runtime_checkable
class PeriodLog(Protocol):
    """Append-only log of completed binge-free periods."""

    def append_period(self, period: BingeFreePeriod) -> str:
        """Store a period and return its ID."""
        ...

    def recent_periods(self, limit: int = 3) -> list[BingeFreePeriod]:
        """Return the most recent periods, newest first."""
        ...


class InMemoryTimerStore:
    """Process-local TimerStore and PeriodLog for tests and offline runs."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._record: TimerRecord | None = None
        self._periods: list[BingeFreePeriod] = []
        self._ids = count(1)
        self.fail_writes: Exception | None = None
        self.fail_appends: Exception | None = None

    @property
    def record(self) -> TimerRecord | None:
        return self._record

    @property
    def periods(self) -> list[BingeFreePeriod]:
        with self._lock:
            return list(self._periods)

    def save_start(self, start_time: datetime) -> None:
        with self._lock:
            self._raise_if(self.fail_writes)
            self._record = TimerRecord(start_time=start_time, is_running=True)

    def save_stop(self, stop_time: datetime) -> None:
        with self._lock:
            self._raise_if(self.fail_writes)
            start_time = self._record.start_time if self._record else stop_time
            self._record = TimerRecord(
                start_time=start_time, is_running=False, stop_time=stop_time
            )

    def clear(self) -> None:
        with self._lock:
            self._raise_if(self.fail_writes)
            self._record = None

    def fetch(self) -> TimerRecord | None:
        with self._lock:
            return self._record

    def append_period(self, period: BingeFreePeriod) -> str:
        with self._lock:
            self._raise_if(self.fail_appends)
            period_id = str(next(self._ids))
            self._periods.append(
                BingeFreePeriod(
                    id=period_id,
                    start_time=period.start_time,
                    end_time=period.end_time,
                    duration=period.duration,
                    created_at=period.created_at,
                )
            )
            return period_id

    def recent_periods(self, limit: int = 3) -> list[BingeFreePeriod]:
        with self._lock:
            newest_first = sorted(self._periods, key=lambda p: p.created_at, reverse=True)
            return newest_first[:limit]

    @staticmethod
    def _raise_if(error: Exception | None) -> None:
        if error is not None:
            raise error


__all__ = ["InMemoryTimerStore", "PeriodLog", "TimerStore"]
