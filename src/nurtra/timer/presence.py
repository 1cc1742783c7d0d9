"""Out-of-app presence of a running timer.

Platforms that can show a running timer outside the app (a lock-screen
widget, a status-bar item) implement PresenceSignal. Everywhere else the
no-op implementation is used.
"""

import logging
from datetime import datetime
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class PresenceSignal(Protocol):
    """Shows and hides a running timer outside the app."""

    def start(self, started_at: datetime) -> None:
        """Show the timer counting up from started_at."""
        ...

    def end(self, elapsed: float) -> None:
        """Hide the timer, showing elapsed seconds as the final value."""
        ...


class NoopPresenceSignal:
    """PresenceSignal that does nothing."""

    def start(self, started_at: datetime) -> None:
        pass

    def end(self, elapsed: float) -> None:
        pass


class LoggingPresenceSignal:
    """PresenceSignal that reports to the log, for terminal runs."""

    def __init__(self) -> None:
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self, started_at: datetime) -> None:
        self._active = True
        logger.info(f"Timer presence shown, running since {started_at.isoformat()}")

    def end(self, elapsed: float) -> None:
        if not self._active:
            return
        self._active = False
        logger.info(f"Timer presence ended at {elapsed:.0f}s")


def create_presence_signal(enabled: bool = False) -> PresenceSignal:
    """Create the presence signal for this platform."""
    if enabled:
        return LoggingPresenceSignal()
    return NoopPresenceSignal()


__all__ = [
    "LoggingPresenceSignal",
    "NoopPresenceSignal",
    "PresenceSignal",
    "create_presence_signal",
]
