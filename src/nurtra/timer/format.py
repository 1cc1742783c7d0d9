"""Display helpers for elapsed time."""

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def time_components(elapsed: float) -> tuple[int, int, int, int]:
    """Split elapsed seconds into whole days, hours, minutes and seconds."""
    total = max(0, int(elapsed))
    days, remainder = divmod(total, SECONDS_PER_DAY)
    hours, remainder = divmod(remainder, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, SECONDS_PER_MINUTE)
    return days, hours, minutes, seconds


def time_string(elapsed: float) -> str:
    """Format elapsed seconds with centiseconds.

    Hours are only shown once the first hour has passed and are not
    folded into days.

    Examples:
        >>> time_string(65.25)
        '01:05.25'
        >>> time_string(3725.5)
        '01:02:05.50'
    """
    elapsed = max(0.0, elapsed)
    total = int(elapsed)
    hours = total // SECONDS_PER_HOUR
    minutes = total // SECONDS_PER_MINUTE % 60
    seconds = total % 60
    centiseconds = int(round((elapsed - total) * 100, 6))

    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{centiseconds:02d}"
    return f"{minutes:02d}:{seconds:02d}.{centiseconds:02d}"


def is_over_one_day(elapsed: float) -> bool:
    """Return True once elapsed reaches 24 hours."""
    return elapsed >= SECONDS_PER_DAY


__all__ = ["is_over_one_day", "time_components", "time_string"]
