"""Per-user account status: overcome count and survey progress."""

import logging
import threading
from typing import Protocol

from ..storage.identity import StaticIdentityProvider
from .memo import MemoizedFetch

logger = logging.getLogger(__name__)


class AccountStore(Protocol):
    """Durable account counters and flags."""

    def get_overcome_count(self) -> int: ...

    def increment_overcome_count(self) -> int: ...

    def is_first_binge_survey_completed(self) -> bool: ...

    def mark_first_binge_survey_completed(self) -> None: ...


class AccountStatus:
    """Local mirror of the signed-in user's account status.

    Store failures are logged and leave the mirror unchanged.
    """

    def __init__(
        self,
        store: AccountStore,
        identity: StaticIdentityProvider | None = None,
    ) -> None:
        """Initialize the account status.

        Args:
            store: Durable account store.
            identity: If given, the mirror is reset when the user signs out.
        """
        self._store = store
        self._lock = threading.Lock()
        self._overcome_count = 0
        self._first_binge_survey = MemoizedFetch(
            store.is_first_binge_survey_completed,
            fallback=False,
            name="first binge survey status",
        )
        if identity is not None:
            identity.on_sign_out(self.reset)

    @property
    def overcome_count(self) -> int:
        return self._overcome_count

    def fetch_overcome_count(self) -> int:
        """Refresh the overcome count from the store."""
        try:
            count = self._store.get_overcome_count()
        except Exception as e:
            logger.error(f"Error fetching overcome count: {e}")
            return self._overcome_count

        with self._lock:
            self._overcome_count = count
        return count

    def increment_overcome_count(self) -> int | None:
        """Record one more overcome craving.

        Returns:
            The new count, or None if the store could not be updated.
        """
        try:
            count = self._store.increment_overcome_count()
        except Exception as e:
            logger.error(f"Error incrementing overcome count: {e}")
            return None

        with self._lock:
            self._overcome_count = count
        return count

    def has_completed_first_binge_survey(self) -> bool:
        """Whether the first binge survey was completed, fetched once."""
        return self._first_binge_survey.get()

    def mark_first_binge_survey_complete(self) -> None:
        """Record completion of the first binge survey."""
        self._first_binge_survey.set(True)
        try:
            self._store.mark_first_binge_survey_completed()
        except Exception as e:
            logger.error(f"Error saving first binge survey completion: {e}")

    def reset(self) -> None:
        """Forget everything cached for the current user."""
        with self._lock:
            self._overcome_count = 0
        self._first_binge_survey.invalidate()
        logger.debug("Account status reset")


class InMemoryAccountStore:
    """Process-local AccountStore for tests and offline runs."""

    def __init__(self, overcome_count: int = 0, survey_completed: bool = False) -> None:
        self._lock = threading.Lock()
        self._overcome_count = overcome_count
        self._survey_completed = survey_completed

    def get_overcome_count(self) -> int:
        return self._overcome_count

    def increment_overcome_count(self) -> int:
        with self._lock:
            self._overcome_count += 1
            return self._overcome_count

    def is_first_binge_survey_completed(self) -> bool:
        return self._survey_completed

    def mark_first_binge_survey_completed(self) -> None:
        self._survey_completed = True


__all__ = ["AccountStatus", "AccountStore", "InMemoryAccountStore"]
