"""Binge-free timer: local ticking, durable state and period logging."""

from ..config import TimerConfig
from .controller import SessionTimerController
from .elapsed import DEFAULT_TICK_INTERVAL, ElapsedTimer
from .format import is_over_one_day, time_components, time_string
from .models import BingeFreePeriod, Clock, TimerRecord, TimerState, utc_now
from .presence import (
    LoggingPresenceSignal,
    NoopPresenceSignal,
    PresenceSignal,
    create_presence_signal,
)
from .store import InMemoryTimerStore, PeriodLog, TimerStore


def create_timer_controller(
    store: TimerStore,
    periods: PeriodLog,
    config: TimerConfig | None = None,
    clock: Clock = utc_now,
) -> SessionTimerController:
    """Create a timer controller from configuration.

    Args:
        store: Durable timer record.
        periods: Log for completed periods.
        config: Timer configuration. Defaults are used if None.
        clock: Source of the current time.

    Returns:
        Configured SessionTimerController.
    """
    config = config or TimerConfig()
    timer = ElapsedTimer(interval=config.tick_interval_ms / 1000, clock=clock)
    presence = create_presence_signal(config.presence_enabled)
    return SessionTimerController(
        store=store, periods=periods, timer=timer, presence=presence, clock=clock
    )


__all__ = [
    "DEFAULT_TICK_INTERVAL",
    "BingeFreePeriod",
    "Clock",
    "ElapsedTimer",
    "InMemoryTimerStore",
    "LoggingPresenceSignal",
    "NoopPresenceSignal",
    "PeriodLog",
    "PresenceSignal",
    "SessionTimerController",
    "TimerRecord",
    "TimerState",
    "TimerStore",
    "create_presence_signal",
    "create_timer_controller",
    "is_over_one_day",
    "time_components",
    "time_string",
    "utc_now",
]
