"""Data models for the binge-free timer."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (as MongoDB returns them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class TimerState(Enum):
    """States of the session timer."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class TimerRecord:
    """Durable snapshot of the current timer, one per user.

    Attributes:
        start_time: When the timer was started.
        is_running: Whether the timer is still running.
        stop_time: When the timer was stopped; always None while running.
    """

    start_time: datetime
    is_running: bool
    stop_time: datetime | None = None

    def __post_init__(self) -> None:
        if self.is_running and self.stop_time is not None:
            raise ValueError("A running timer cannot have a stop time")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the user-document fields."""
        return {
            "timerStartTime": self.start_time,
            "timerIsRunning": self.is_running,
            "timerStopTime": self.stop_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimerRecord | None":
        """Create from user-document fields.

        Returns:
            The record, or None if the document holds no usable timer.
        """
        start_time = data.get("timerStartTime")
        if not isinstance(start_time, datetime):
            return None

        is_running = bool(data.get("timerIsRunning", False))
        stop_time = data.get("timerStopTime")
        if is_running or not isinstance(stop_time, datetime):
            stop_time = None

        return cls(
            start_time=ensure_aware(start_time),
            is_running=is_running,
            stop_time=ensure_aware(stop_time) if stop_time else None,
        )


@dataclass(frozen=True)
class BingeFreePeriod:
    """One completed stretch of tracked abstinence.

    Attributes:
        start_time: When the timer was started.
        end_time: When the timer was stopped.
        duration: end_time - start_time in seconds.
        created_at: When the period was recorded.
        id: Document ID once stored.
    """

    start_time: datetime
    end_time: datetime
    duration: float
    created_at: datetime
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BingeFreePeriod | None":
        """Create from MongoDB document, or None if a field is missing."""
        start_time = data.get("startTime")
        end_time = data.get("endTime")
        duration = data.get("duration")
        created_at = data.get("createdAt")

        if not (
            isinstance(start_time, datetime)
            and isinstance(end_time, datetime)
            and isinstance(created_at, datetime)
            and isinstance(duration, int | float)
        ):
            return None

        return cls(
            id=str(data["_id"]) if "_id" in data else None,
            start_time=ensure_aware(start_time),
            end_time=ensure_aware(end_time),
            duration=float(duration),
            created_at=ensure_aware(created_at),
        )


__all__ = [
    "BingeFreePeriod",
    "Clock",
    "TimerRecord",
    "TimerState",
    "ensure_aware",
    "utc_now",
]
