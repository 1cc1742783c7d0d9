"""Account status, memoized lookups and the paywall gate."""

from .memo import MemoizedFetch
from .paywall import MockSubscriptionService, PaywallGate, SubscriptionService
from .status import AccountStatus, AccountStore, InMemoryAccountStore

__all__ = [
    "AccountStatus",
    "AccountStore",
    "InMemoryAccountStore",
    "MemoizedFetch",
    "MockSubscriptionService",
    "PaywallGate",
    "SubscriptionService",
]
