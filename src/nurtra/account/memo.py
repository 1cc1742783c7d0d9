"""Fetch-once value that stays cached until invalidated."""

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemoizedFetch(Generic[T]):
    """Caches the result of a fetch until ``invalidate()``.

    A failed fetch caches the fallback, so a broken backend is not asked
    again until the value is invalidated.

    Example:
        survey_done = MemoizedFetch(repo.is_first_binge_survey_completed, False)
        survey_done.get()  # fetches
        survey_done.get()  # cached
        survey_done.invalidate()
    """

    def __init__(self, fetch: Callable[[], T], fallback: T, name: str = "value") -> None:
        """Initialize the memo.

        Args:
            fetch: Produces the value. May raise.
            fallback: Value cached when fetch raises.
            name: Used in log messages.
        """
        self._fetch = fetch
        self._fallback = fallback
        self._name = name
        self._lock = threading.Lock()
        self._value: T = fallback
        self._cached = False
        self._fetch_count = 0

    @property
    def is_cached(self) -> bool:
        return self._cached

    @property
    def fetch_count(self) -> int:
        """Number of times fetch was called."""
        return self._fetch_count

    def get(self) -> T:
        """Return the cached value, fetching it on first use."""
        with self._lock:
            if self._cached:
                logger.debug(f"Using cached {self._name}: {self._value}")
                return self._value

            self._fetch_count += 1
            try:
                self._value = self._fetch()
            except Exception as e:
                logger.error(f"Error fetching {self._name}, using {self._fallback}: {e}")
                self._value = self._fallback

            self._cached = True
            return self._value

    def set(self, value: T) -> None:
        """Cache a value known without fetching."""
        with self._lock:
            self._value = value
            self._cached = True

    def invalidate(self) -> None:
        """Drop the cached value so the next get fetches again."""
        with self._lock:
            self._value = self._fallback
            self._cached = False


__all__ = ["MemoizedFetch"]
