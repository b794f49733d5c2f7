"""Service for executing API requests with authentication and rate-limit retries.

Attaches the bearer token, issues the call through the transport and
retries 429 responses a bounded number of times, waiting as long as the
server's ``Retry-After`` hint asks. Everything else is handed back to the
caller unchanged: only rate limiting is retried here.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Mapping, Optional

import httpx

from findapi.domain.errors import RateLimitError, TokenRefreshError, TransportError
from findapi.domain.events.api_events import (
    ApiCallFailed, ApiCallInitiated, ApiCallSucceeded, EventHook, RetryScheduled,
    dispatch_event,
)
from findapi.domain.interfaces.transport import Transport
from findapi.domain.models.common import FIND_API_URL
from findapi.domain.models.request import RequestDescriptor
from findapi.infrastructure.auth.token_cache import TokenCache
from findapi.infrastructure.resilience.retry_after import (
    DEFAULT_RETRY_AFTER_SECONDS, parse_retry_after
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
RATE_LIMITED_STATUS = 429

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

Sleeper = Callable[[float], Awaitable[None]]


class RequestDispatcher:
    """Performs one logical request end to end."""

    def __init__(
        self,
        transport: Transport,
        *,
        base_url: str = FIND_API_URL,
        token_cache: Optional[TokenCache] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Sleeper = asyncio.sleep,
        event_hook: Optional[EventHook] = None,
    ):
        """Initializes the RequestDispatcher.

        Args:
            transport: Issues the HTTP calls.
            base_url: Prefix for every request path.
            token_cache: Source of bearer tokens for authenticated requests.
            max_attempts: Total number of tries for a rate-limited request.
            sleep: Awaitable used to wait between attempts (cancellable).
            event_hook: Optional observer for request events.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.token_cache = token_cache
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._event_hook = event_hook

        logger.debug(
            f"RequestDispatcher initialized: base_url={self.base_url}, "
            f"max_attempts={max_attempts}, auth={'enabled' if token_cache else 'disabled'}"
        )

    def resolve_url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return self.base_url + path

    async def _bearer_token(self) -> str:
        if self.token_cache is None:
            raise TokenRefreshError("token refresh failed: no token cache configured for authenticated requests")
        return await self.token_cache.get_valid()

    async def send(
        self,
        descriptor: RequestDescriptor,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Sends the request, retrying while the server answers 429.

        Args:
            descriptor: What to send.
            headers: Extra headers (e.g. a Basic credential for the exchange).

        Returns:
            The raw response. Any status other than 429 is returned as is;
            decoding and API error classification belong to the caller.

        Raises:
            TokenRefreshError: If no bearer token could be obtained.
            TransportError: If the transport failed to produce a response.
            RateLimitError: If every attempt was rate limited.
            asyncio.CancelledError: If the calling task was cancelled.
        """
        method = descriptor.method
        path = descriptor.path
        url = self.resolve_url(path)

        request_headers = dict(DEFAULT_HEADERS)
        if headers:
            request_headers.update(headers)
        if descriptor.requires_auth:
            token = await self._bearer_token()
            request_headers["Authorization"] = f"Bearer {token}"
        params = dict(descriptor.query) or None

        retry_after = DEFAULT_RETRY_AFTER_SECONDS
        response: Optional[httpx.Response] = None

        for attempt in range(1, self.max_attempts + 1):
            dispatch_event(
                ApiCallInitiated(method=method, path=path, attempt_number=attempt),
                self._event_hook, logger,
            )
            start_time = time.perf_counter()
            try:
                response = await self.transport.execute(
                    method, url, headers=request_headers, params=params
                )
            except httpx.RequestError as e:
                logger.error(f"Transport error on {method} {path} (attempt {attempt}): {type(e).__name__}: {e}")
                dispatch_event(
                    ApiCallFailed(method=method, path=path, error_type=type(e).__name__, error_message=str(e)),
                    self._event_hook, logger,
                )
                raise TransportError(f"request failed: {method} {path}: {e}", method=method, url=url) from e
            latency_ms = (time.perf_counter() - start_time) * 1000

            if response.status_code != RATE_LIMITED_STATUS:
                logger.debug(f"{method} {path} -> {response.status_code} in {latency_ms:.2f}ms (attempt {attempt})")
                dispatch_event(
                    ApiCallSucceeded(
                        method=method, path=path, status_code=response.status_code,
                        latency_ms=latency_ms, attempts=attempt,
                    ),
                    self._event_hook, logger,
                )
                return response

            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            if attempt >= self.max_attempts:
                break

            delay = max(retry_after, 0.0)
            logger.warning(
                f"Rate limited on {method} {path} (attempt {attempt}/{self.max_attempts}). "
                f"Waiting {delay:.2f}s..."
            )
            dispatch_event(
                RetryScheduled(method=method, path=path, attempt_number=attempt, delay_seconds=delay),
                self._event_hook, logger,
            )
            await response.aclose()
            await self._sleep(delay)

        if response is not None:
            await response.aclose()
        logger.error(f"Rate limit retries exhausted for {method} {path} after {self.max_attempts} attempts.")
        error = RateLimitError(retry_after=retry_after, attempts=self.max_attempts)
        dispatch_event(
            ApiCallFailed(method=method, path=path, error_type=type(error).__name__, error_message=str(error)),
            self._event_hook, logger,
        )
        raise error
