"""Identity of the signed-in user.

Every user-scoped document is keyed by the current user ID. Sign-in itself
happens elsewhere; storage only asks who is signed in right now.
"""

import logging
import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class IdentityProvider(Protocol):
    """Source of the current user ID."""

    @property
    def current_user_id(self) -> str | None:
        """ID of the signed-in user, or None when signed out."""
        ...


class StaticIdentityProvider:
    """IdentityProvider holding a user ID set by the caller.

    Listeners registered with ``on_sign_out`` run after the ID is cleared,
    so per-user memoized values can be dropped.
    """

    def __init__(self, user_id: str | None = None) -> None:
        self._user_id = user_id
        self._lock = threading.Lock()
        self._sign_out_listeners: list[Callable[[], None]] = []

    @property
    def current_user_id(self) -> str | None:
        return self._user_id

    def sign_in(self, user_id: str) -> None:
        with self._lock:
            self._user_id = user_id
        logger.info(f"Signed in as {user_id}")

    def sign_out(self) -> None:
        with self._lock:
            self._user_id = None
            listeners = list(self._sign_out_listeners)

        logger.info("Signed out")
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.warning(f"Sign-out listener failed: {e}")

    def on_sign_out(self, listener: Callable[[], None]) -> None:
        with self._lock:
            self._sign_out_listeners.append(listener)


__all__ = ["IdentityProvider", "StaticIdentityProvider"]
