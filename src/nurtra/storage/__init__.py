"""MongoDB storage module for Nurtra.

Provides persistent per-user storage for the timer record, binge-free
periods, motivational quotes and account counters.
"""

import os

from ..config import StorageConfig
from .client import MongoStorageClient, retry_on_connection_failure
from .errors import NotAuthenticatedError, StorageError
from .identity import IdentityProvider, StaticIdentityProvider
from .users import (
    AccountRepository,
    PeriodRepository,
    QuoteRepository,
    TimerRepository,
    UserRepositories,
)


MONGODB_URI_ENV_VAR = "NURTRA_MONGODB_URI"


def create_storage_client(config: StorageConfig | None = None) -> MongoStorageClient:
    """Create an unconnected storage client from configuration.

    The NURTRA_MONGODB_URI environment variable overrides the configured URI.
    """
    config = config or StorageConfig()
    return MongoStorageClient(
        uri=os.environ.get(MONGODB_URI_ENV_VAR) or config.uri,
        database_name=config.database,
        connect_timeout_ms=config.connect_timeout_ms,
        server_selection_timeout_ms=config.server_selection_timeout_ms,
    )


__all__ = [
    "MONGODB_URI_ENV_VAR",
    "AccountRepository",
    "IdentityProvider",
    "MongoStorageClient",
    "NotAuthenticatedError",
    "PeriodRepository",
    "QuoteRepository",
    "StaticIdentityProvider",
    "StorageError",
    "TimerRepository",
    "UserRepositories",
    "create_storage_client",
    "retry_on_connection_failure",
]
