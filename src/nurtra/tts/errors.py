"""Error types for speech synthesis.

Custom exceptions for text-to-speech API interactions.
"""


class SynthesisError(Exception):
    """Base exception for synthesis failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize synthesis error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(SynthesisError):
    """Raised when the API key is missing or rejected."""

    pass


class RateLimitedError(SynthesisError):
    """Raised when the provider reports too many requests."""

    pass


class ServerError(SynthesisError):
    """Raised on a 5xx response from the provider."""

    pass


class InvalidResponseError(SynthesisError):
    """Raised when no usable response came back."""

    pass


class EncodingFailedError(SynthesisError):
    """Raised when the request body cannot be built from the text."""

    pass


def error_for_status(status_code: int, detail: str = "") -> SynthesisError:
    """Map an HTTP status code to a typed synthesis error.

    Args:
        status_code: HTTP status returned by the provider.
        detail: Extra context for the message.

    Returns:
        The matching SynthesisError subclass instance.
    """
    suffix = f": {detail}" if detail else ""
    if status_code == 401:
        return UnauthorizedError(f"Unauthorized, check the API key{suffix}", status_code)
    if status_code == 429:
        return RateLimitedError(f"Rate limit exceeded{suffix}", status_code)
    if 500 <= status_code <= 599:
        return ServerError(f"Provider server error{suffix}", status_code)
    return InvalidResponseError(f"Unexpected status {status_code}{suffix}", status_code)


__all__ = [
    "EncodingFailedError",
    "InvalidResponseError",
    "RateLimitedError",
    "ServerError",
    "SynthesisError",
    "UnauthorizedError",
    "error_for_status",
]
