"""Session timer controller.

Owns the Idle -> Running -> Stopped lifecycle of the binge-free timer. Local
state always changes first and synchronously; persistence is queued on a
single worker so writes reach the store in the order they were issued.
A failed write is logged and never rolls local state back.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import TypeVar

from .elapsed import ElapsedTimer
from .models import BingeFreePeriod, Clock, TimerRecord, TimerState, utc_now
from .presence import NoopPresenceSignal, PresenceSignal
from .store import PeriodLog, TimerStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _done(value: T) -> "Future[T]":
    future: Future[T] = Future()
    future.set_result(value)
    return future


class SessionTimerController:
    """Binge-free timer with durable state.

    Example:
        controller = SessionTimerController(store, periods)
        controller.fetch_and_resume()
        controller.start_timer()
        ...
        period = controller.stop_timer_and_log_period().result()
    """

    def __init__(
        self,
        store: TimerStore,
        periods: PeriodLog,
        timer: ElapsedTimer | None = None,
        presence: PresenceSignal | None = None,
        clock: Clock = utc_now,
        executor: Executor | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            store: Durable timer record.
            periods: Log that completed periods are appended to.
            timer: Local ticking clock. Created with the same clock if None.
            presence: Out-of-app presence. No-op if None.
            clock: Source of the current time.
            executor: Runs persistence. A single-worker pool if None.
        """
        self._store = store
        self._periods = periods
        self._clock = clock
        self._timer = timer or ElapsedTimer(clock=clock)
        self._presence = presence or NoopPresenceSignal()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="nurtra-timer-store"
        )

        self._lock = threading.RLock()
        self._state = TimerState.IDLE
        self._started_at: datetime | None = None
        self._logged = False
        self._last_period: BingeFreePeriod | None = None

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is TimerState.RUNNING

    @property
    def elapsed(self) -> float:
        """Elapsed seconds as last published by the local timer."""
        return self._timer.elapsed

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def logged(self) -> bool:
        """True if the current stop was logged as a binge-free period."""
        return self._logged

    @property
    def last_period(self) -> BingeFreePeriod | None:
        """Period produced by the most recent stop-and-log."""
        return self._last_period

    def start_timer(self) -> "Future[None]":
        """Start a new binge-free period now.

        Does nothing while a period is already running.

        Returns:
            Future that completes once the start has been persisted.
        """
        with self._lock:
            if self._state is TimerState.RUNNING:
                logger.warning("Timer already running, start ignored")
                return _done(None)

            now = self._clock()
            self._started_at = now
            self._state = TimerState.RUNNING
            self._logged = False
            self._timer.start(now)

        logger.info(f"Timer started at {now.isoformat()}")
        self._signal_start(now)
        return self._persist("saving timer start", lambda: self._store.save_start(now))

    def stop_timer_and_log_period(self) -> "Future[BingeFreePeriod | None]":
        """Stop the running period and record it.

        The local tick is halted before the duration is computed, so the
        displayed value freezes exactly at the logged duration. Saving the
        stop and appending the period are attempted independently.

        Returns:
            Future with the period (carrying its ID once appended), or None
            if no period was running.
        """
        with self._lock:
            if self._state is not TimerState.RUNNING or self._started_at is None:
                logger.warning("No running timer to stop and log")
                return _done(None)

            self._timer.stop()
            start = self._started_at
            end = self._clock()
            duration = (end - start).total_seconds()
            self._timer.freeze(start, end)
            self._state = TimerState.STOPPED
            self._logged = True
            period = BingeFreePeriod(
                start_time=start, end_time=end, duration=duration, created_at=end
            )
            self._last_period = period

        logger.info(f"Timer stopped after {duration:.2f}s, logging binge-free period")
        self._signal_end(duration)

        def persist() -> BingeFreePeriod:
            try:
                self._store.save_stop(end)
            except Exception as e:
                logger.error(f"Error saving timer stop: {e}")

            try:
                period_id = self._periods.append_period(period)
            except Exception as e:
                logger.error(f"Error logging binge-free period: {e}")
                return period

            stored = replace(period, id=period_id)
            with self._lock:
                if self._last_period is period:
                    self._last_period = stored
            return stored

        return self._executor.submit(persist)

    def stop_timer(self) -> "Future[None]":
        """Stop the running period without logging it."""
        with self._lock:
            if self._state is not TimerState.RUNNING or self._started_at is None:
                logger.debug("Timer not running, stop ignored")
                return _done(None)

            self._timer.stop()
            end = self._clock()
            self._timer.freeze(self._started_at, end)
            self._state = TimerState.STOPPED
            self._logged = False
            elapsed = self._timer.elapsed

        logger.info("Timer stopped without logging")
        self._signal_end(elapsed)
        return self._persist("saving timer stop", lambda: self._store.save_stop(end))

    def reset_timer(self) -> "Future[None]":
        """Return to Idle and clear the stored record."""
        with self._lock:
            was_running = self._state is TimerState.RUNNING
            elapsed = self._timer.elapsed
            self._timer.reset()
            self._state = TimerState.IDLE
            self._started_at = None
            self._logged = False

        logger.info("Timer reset")
        if was_running:
            self._signal_end(elapsed)
        return self._persist("clearing timer", self._store.clear)

    def fetch_and_resume(self) -> TimerRecord | None:
        """Rebuild local state from the stored record.

        Any local tick is invalidated before the stored state is applied.
        A running record resumes ticking from its start; a stopped one shows
        stop - start, or now - start when no stop time was stored.

        Returns:
            The stored record, or None if there was none or the fetch failed.
        """
        try:
            record = self._store.fetch()
        except Exception as e:
            logger.error(f"Error fetching timer: {e}")
            return None

        if record is None:
            logger.debug("No stored timer, staying idle")
            return None

        with self._lock:
            self._timer.stop()
            self._started_at = record.start_time
            self._logged = False
            if record.is_running:
                self._state = TimerState.RUNNING
                self._timer.resume(record.start_time)
            else:
                self._state = TimerState.STOPPED
                self._timer.resume(record.start_time, record.stop_time or self._clock())

        if record.is_running:
            logger.info(f"Resumed running timer from {record.start_time.isoformat()}")
            self._signal_start(record.start_time)
        else:
            logger.info("Restored stopped timer")
        return record

    def shutdown(self, wait: bool = True) -> None:
        """Stop ticking and finish queued persistence."""
        self._timer.stop()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _persist(self, description: str, work: Callable[[], None]) -> "Future[None]":
        def run() -> None:
            try:
                work()
            except Exception as e:
                logger.error(f"Error {description}: {e}")

        return self._executor.submit(run)

    def _signal_start(self, started_at: datetime) -> None:
        try:
            self._presence.start(started_at)
        except Exception as e:
            logger.warning(f"Failed to show timer presence: {e}")

    def _signal_end(self, elapsed: float) -> None:
        try:
            self._presence.end(elapsed)
        except Exception as e:
            logger.warning(f"Failed to end timer presence: {e}")


__all__ = ["SessionTimerController"]
