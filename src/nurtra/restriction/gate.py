"""Decides when the user's app restrictions are applied and removed.

The selection and the lock status live in local state. The lock status is
read-modify-write without a transaction; only the craving session toggles it
and its calls are serialized.
"""

import logging

from .platform import RestrictionPlatform
from .selection import RestrictionSelection
from .state import LocalStateStore

logger = logging.getLogger(__name__)

DEFAULT_SELECTION_KEY = "savedFamilyActivitySelection"
DEFAULT_LOCK_STATUS_KEY = "isAppsLocked"


class AppRestrictionGate:
    """Applies and clears the saved restriction selection.

    No method raises: a missing or malformed selection and platform
    failures are logged and turn the call into a no-op.
    """

    def __init__(
        self,
        state: LocalStateStore,
        platform: RestrictionPlatform,
        selection_key: str = DEFAULT_SELECTION_KEY,
        lock_status_key: str = DEFAULT_LOCK_STATUS_KEY,
    ) -> None:
        """Initialize the gate.

        Args:
            state: Local key-value state holding selection and lock status.
            platform: Facility that enforces restrictions.
            selection_key: State key of the encoded selection.
            lock_status_key: State key of the lock status.
        """
        self._state = state
        self._platform = platform
        self._selection_key = selection_key
        self._lock_status_key = lock_status_key

    @property
    def is_locked(self) -> bool:
        """Persisted lock status."""
        return self._state.get_bool(self._lock_status_key)

    def save_selection(self, selection: RestrictionSelection) -> bool:
        """Persist the selection to restrict.

        Returns:
            True if saved successfully, False otherwise.
        """
        saved = self._state.set(self._selection_key, selection.encode())
        if saved:
            logger.info("Saved restriction selection")
        return saved

    def load_selection(self) -> RestrictionSelection | None:
        """Load the persisted selection.

        Returns:
            The selection, or None if absent or unreadable.
        """
        blob = self._state.get(self._selection_key)
        if blob is None:
            logger.debug("No saved restriction selection")
            return None

        if not isinstance(blob, str):
            logger.error("Saved restriction selection is not an encoded blob")
            return None

        try:
            return RestrictionSelection.decode(blob)
        except ValueError as e:
            logger.error(f"Failed to decode restriction selection: {e}")
            return None

    def auto_lock(self) -> bool:
        """Apply the saved selection unless already locked.

        Returns:
            True if restrictions were applied by this call.
        """
        if self.is_locked:
            logger.debug("Apps already locked, no action needed")
            return False

        return self._apply_saved_selection()

    def auto_unlock(self) -> None:
        """Clear all restrictions and record the unlocked status.

        Safe to call when nothing is locked.
        """
        try:
            self._platform.clear()
        except Exception as e:
            logger.error(f"Failed to clear restrictions: {e}")

        self._state.set(self._lock_status_key, False)
        logger.info("Unlocked apps")

    def lock(self) -> bool:
        """Apply the saved selection, even if already marked locked."""
        return self._apply_saved_selection()

    def unlock(self) -> None:
        """Clear all restrictions."""
        self.auto_unlock()

    def reconcile(self) -> bool:
        """Re-apply the saved selection when the lock status says locked.

        Resolves divergence between the lock status and the platform, e.g.
        after the process died between the two updates.

        Returns:
            True if restrictions were re-applied.
        """
        if not self.is_locked:
            return False

        selection = self.load_selection()
        if selection is None or selection.is_empty:
            logger.warning("Lock status set without a usable selection, unlocking")
            self.auto_unlock()
            return False

        try:
            self._platform.apply(selection)
        except Exception as e:
            logger.error(f"Failed to re-apply restrictions: {e}")
            return False

        logger.info("Re-applied saved restrictions")
        return True

    def _apply_saved_selection(self) -> bool:
        selection = self.load_selection()
        if selection is None:
            return False

        if selection.is_empty:
            logger.debug("No apps selected for blocking")
            return False

        try:
            self._platform.apply(selection)
        except Exception as e:
            logger.error(f"Failed to apply restrictions: {e}")
            return False

        self._state.set(self._lock_status_key, True)
        logger.info(
            f"Locked apps: {len(selection.applications)} apps, "
            f"{len(selection.categories)} categories, "
            f"{len(selection.web_domains)} web domains"
        )
        return True


__all__ = ["DEFAULT_LOCK_STATUS_KEY", "DEFAULT_SELECTION_KEY", "AppRestrictionGate"]
