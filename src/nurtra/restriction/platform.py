"""Platform facility that enforces app restrictions."""

import logging
from typing import Protocol, runtime_checkable

from .selection import RestrictionSelection

logger = logging.getLogger(__name__)


@runtime_checkable
class RestrictionPlatform(Protocol):
    """Applies and clears restrictions on the device."""

    def apply(self, selection: RestrictionSelection) -> None:
        """Restrict everything in selection, replacing earlier restrictions."""
        ...

    def clear(self) -> None:
        """Remove all restrictions."""
        ...


class LoggingRestrictionPlatform:
    """Platform for desktops without a restriction facility.

    Only reports what would be restricted.
    """

    def apply(self, selection: RestrictionSelection) -> None:
        logger.info(
            f"Restricting {len(selection.applications)} apps, "
            f"{len(selection.categories)} categories, "
            f"{len(selection.web_domains)} web domains"
        )

    def clear(self) -> None:
        logger.info("Cleared all restrictions")


class MockRestrictionPlatform:
    """Mock platform for testing."""

    def __init__(self) -> None:
        self._applied: RestrictionSelection | None = None
        self._apply_count = 0
        self._clear_count = 0
        self._fail_with: Exception | None = None

    @property
    def applied(self) -> RestrictionSelection | None:
        """Selection currently enforced, None when clear."""
        return self._applied

    @property
    def apply_count(self) -> int:
        return self._apply_count

    @property
    def clear_count(self) -> int:
        return self._clear_count

    def set_failure(self, error: Exception | None) -> None:
        """Make apply and clear raise error (None to stop failing)."""
        self._fail_with = error

    def apply(self, selection: RestrictionSelection) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self._applied = selection
        self._apply_count += 1

    def clear(self) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self._applied = None
        self._clear_count += 1


__all__ = ["LoggingRestrictionPlatform", "MockRestrictionPlatform", "RestrictionPlatform"]
