"""Storage exceptions."""


class StorageError(Exception):
    """Raised when a document store operation fails."""


class NotAuthenticatedError(StorageError):
    """Raised when a user-scoped operation runs without a signed-in user."""

    def __init__(self, message: str = "No authenticated user") -> None:
        super().__init__(message)


__all__ = ["NotAuthenticatedError", "StorageError"]
