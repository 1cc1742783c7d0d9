"""Subscription status and paywall presentation."""

import logging
import threading
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class SubscriptionService(Protocol):
    """Subscription backend with a paywall it can present."""

    @property
    def is_paywall_presented(self) -> bool:
        """True while a paywall is showing."""
        ...

    def is_subscribed(self) -> bool: ...

    def present(self, placement: str) -> None:
        """Show the paywall registered for placement."""
        ...


class PaywallGate:
    """Presents paywalls without stacking them."""

    def __init__(self, service: SubscriptionService) -> None:
        self._service = service
        self._lock = threading.Lock()

    def is_subscribed(self) -> bool:
        """Subscription status, False when it cannot be determined."""
        try:
            return self._service.is_subscribed()
        except Exception as e:
            logger.error(f"Error checking subscription status: {e}")
            return False

    def present(self, placement: str) -> bool:
        """Present the paywall for placement unless one is already showing.

        Returns:
            True if a presentation was requested.
        """
        with self._lock:
            if self._service.is_paywall_presented:
                logger.warning("Paywall already presented, skipping duplicate presentation")
                return False

            try:
                self._service.present(placement)
            except Exception as e:
                logger.error(f"Failed to present paywall '{placement}': {e}")
                return False

        logger.info(f"Presented paywall for '{placement}'")
        return True


class MockSubscriptionService:
    """Mock subscription service for testing and offline runs."""

    def __init__(self, subscribed: bool = False) -> None:
        self._subscribed = subscribed
        self._presented = False
        self._placements: list[str] = []

    @property
    def is_paywall_presented(self) -> bool:
        return self._presented

    @property
    def placements(self) -> list[str]:
        """Placements presented so far."""
        return list(self._placements)

    def is_subscribed(self) -> bool:
        return self._subscribed

    def set_subscribed(self, subscribed: bool) -> None:
        self._subscribed = subscribed

    def present(self, placement: str) -> None:
        self._presented = True
        self._placements.append(placement)

    def dismiss(self) -> None:
        self._presented = False


__all__ = ["MockSubscriptionService", "PaywallGate", "SubscriptionService"]
