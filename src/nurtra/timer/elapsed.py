"""Local ticking clock for the binge-free timer.

Elapsed time is always recomputed as ``now - start`` on each tick and never
accumulated, so it cannot drift. Ticks are published under the same lock
``stop()`` takes: once ``stop()`` returns, no further value is published.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from .models import Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.01


class ElapsedTimer:
    """Publishes the time elapsed since a start instant at a fixed interval."""

    def __init__(
        self,
        interval: float = DEFAULT_TICK_INTERVAL,
        clock: Clock = utc_now,
        on_tick: Callable[[float], None] | None = None,
    ) -> None:
        """Initialize the timer.

        Args:
            interval: Seconds between ticks.
            clock: Source of the current time.
            on_tick: Called with the elapsed seconds on every published value.
        """
        self._interval = interval
        self._clock = clock
        self._on_tick = on_tick
        self._lock = threading.RLock()
        self._token = 0
        self._ticking = False
        self._started_at: datetime | None = None
        self._elapsed = 0.0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def elapsed(self) -> float:
        """Last published elapsed time in seconds."""
        return self._elapsed

    @property
    def started_at(self) -> datetime | None:
        """Instant the current value is measured from."""
        return self._started_at

    @property
    def is_ticking(self) -> bool:
        """Return True while periodic ticks are being published."""
        return self._ticking

    def start(self, at: datetime) -> None:
        """Start ticking from the given instant.

        Any previous tick loop is invalidated first, so at most one loop
        publishes at a time.
        """
        with self._lock:
            self._invalidate()
            self._started_at = at
            self._ticking = True
            token = self._token
            stop_event = self._stop_event
            self._publish()
            self._thread = threading.Thread(
                target=self._run,
                args=(token, stop_event),
                daemon=True,
                name="nurtra-elapsed-timer",
            )
            self._thread.start()

    def stop(self) -> None:
        """Stop ticking. Returns only once no further tick can publish."""
        with self._lock:
            self._invalidate()

    def freeze(self, started_at: datetime, stopped_at: datetime) -> None:
        """Stop ticking and hold the value stopped_at - started_at."""
        with self._lock:
            self._invalidate()
            self._started_at = started_at
            self._set_elapsed(max(0.0, (stopped_at - started_at).total_seconds()))

    def resume(self, started_at: datetime, frozen_at: datetime | None = None) -> None:
        """Rebuild state after a restart.

        Ticks live from started_at when frozen_at is None, otherwise holds
        the final value frozen_at - started_at without ticking.
        """
        if frozen_at is None:
            self.start(started_at)
        else:
            self.freeze(started_at, frozen_at)

    def reset(self) -> None:
        """Stop ticking and return to zero."""
        with self._lock:
            self._invalidate()
            self._started_at = None
            self._set_elapsed(0.0)

    def _invalidate(self) -> None:
        self._token += 1
        self._ticking = False
        self._stop_event.set()
        self._stop_event = threading.Event()
        self._thread = None

    def _run(self, token: int, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            with self._lock:
                if token != self._token:
                    return
                self._publish()

    def _publish(self) -> None:
        if self._started_at is None:
            return
        self._set_elapsed(max(0.0, (self._clock() - self._started_at).total_seconds()))

    def _set_elapsed(self, value: float) -> None:
        self._elapsed = value
        if self._on_tick is not None:
            try:
                self._on_tick(value)
            except Exception as e:
                logger.warning(f"Elapsed-time listener failed: {e}")


__all__ = ["DEFAULT_TICK_INTERVAL", "ElapsedTimer"]
