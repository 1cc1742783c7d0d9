"""MongoDB connection for Nurtra.

Repositories take the database from a connected MongoStorageClient and wrap
their calls in ``retry_on_connection_failure``, so a brief network drop is
retried with backoff and a lasting one surfaces as StorageError.
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure

from .errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_connection_failure(
    max_retries: int = 3,
    base_delay: float = 0.5,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry a storage call on connection failures with exponential backoff.

    Only ConnectionFailure and its subclasses (server selection timeouts,
    auto-reconnects, network timeouts) are retried; every other error
    propagates on the first attempt.

    Args:
        max_retries: Total number of attempts.
        base_delay: Delay before the second attempt, doubled after each failure.

    Raises:
        StorageError: Wrapping the last connection failure once attempts run out.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            delay = base_delay
            for attempt in range(1, max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except ConnectionFailure as e:
                    if attempt == max_retries:
                        logger.error(
                            f"{func.__qualname__} failed after {max_retries} attempts: {e}"
                        )
                        raise StorageError(str(e)) from e
                    logger.warning(
                        f"{func.__qualname__} lost the connection "
                        f"(attempt {attempt}/{max_retries}), retrying in {delay:.1f}s: {e}"
                    )
                    time.sleep(delay)
                    delay *= 2
            raise StorageError(f"{func.__qualname__} was not attempted")

        return wrapper

    return decorator


class MongoStorageClient:
    """Owns the MongoDB client and hands out the Nurtra database.

    Usage:
        with MongoStorageClient(uri, "nurtra") as storage:
            repositories = UserRepositories.from_database(storage.database, identity)
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database_name: str = "nurtra",
        connect_timeout_ms: int = 5000,
        server_selection_timeout_ms: int = 5000,
        client: MongoClient[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the storage client.

        Args:
            uri: MongoDB connection URI.
            database_name: Name of the database to use.
            connect_timeout_ms: Connection timeout in milliseconds.
            server_selection_timeout_ms: Server selection timeout in milliseconds.
            client: Pre-built client to use instead of connecting to uri.
        """
        self._uri = uri
        self._database_name = database_name
        self._connect_timeout_ms = connect_timeout_ms
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client = client
        self._db: Database[dict[str, Any]] | None = None

    def connect(self) -> None:
        """Open the connection and check the server answers.

        Datetimes come back timezone-aware (UTC).

        Raises:
            StorageError: If the server cannot be reached.
        """
        if self._db is not None:
            return

        if self._client is None:
            self._client = MongoClient(
                self._uri,
                connectTimeoutMS=self._connect_timeout_ms,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                tz_aware=True,
            )

        try:
            self._client.admin.command("ping")
        except ConnectionFailure as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise StorageError(f"Failed to connect to MongoDB: {e}") from e

        self._db = self._client[self._database_name]
        logger.info(f"Connected to MongoDB database {self._database_name}")

    def disconnect(self) -> None:
        """Close the connection. Safe to call when not connected."""
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._db = None
        logger.info("Disconnected from MongoDB")

    def is_connected(self) -> bool:
        return self._db is not None

    @property
    def database(self) -> Database[dict[str, Any]]:
        """The Nurtra database.

        Raises:
            RuntimeError: If not connected.
        """
        if self._db is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return self._db

    def __enter__(self) -> "MongoStorageClient":
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.disconnect()


__all__ = ["MongoStorageClient", "retry_on_connection_failure"]
