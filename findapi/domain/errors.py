"""Error taxonomy of the findapi client.

Every error raised by the library derives from `FindApiError`, so callers
can classify outcomes with ``isinstance`` (or the `is_*` helpers) instead
of matching message strings. Cancellation is not part of this hierarchy:
``asyncio.CancelledError`` and the caller's ``TimeoutError`` propagate
unchanged.
"""

from typing import Optional


class FindApiError(Exception):
    """Base class for all findapi errors."""


class TransportError(FindApiError):
    """The request never produced a usable HTTP response (connection error, timeout, corrupt body encoding)."""

    def __init__(self, message: str, method: Optional[str] = None, url: Optional[str] = None):
        self.method = method
        self.url = url
        super().__init__(message)


class TokenRefreshError(FindApiError):
    """The credential exchange failed, so no bearer token could be obtained."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class RateLimitError(FindApiError):
    """The retry budget was exhausted while the server kept answering 429.

    Attributes:
        retry_after: The last delay (seconds) the server asked for.
        attempts: How many requests were sent before giving up.
    """

    def __init__(self, retry_after: float, attempts: int = 0):
        self.retry_after = retry_after
        self.attempts = attempts
        super().__init__(f"rate limit exceeded, retry after {retry_after:g}s")


class APIError(FindApiError):
    """The API answered with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response.
        message: Raw response body text.
    """

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error (status {status_code}): {message}")


class DecodeError(FindApiError):
    """A successful response body could not be parsed into the expected shape."""


def is_rate_limit_error(error: BaseException) -> bool:
    """Checks if an error is a rate limit error."""
    return isinstance(error, RateLimitError)


def is_api_error(error: BaseException) -> bool:
    """Checks if an error is an API error."""
    return isinstance(error, APIError)
