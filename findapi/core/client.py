"""Main client for the FindLabs API.

Wires the transport, the auth service, the token cache and the request
dispatcher together and exposes the two request operations endpoint
services build on: authenticated requests and Basic-auth requests for
the credential exchange.

Usage:
    async with Client(username, password) as client:
        response = await client.do_request("GET", "/simple/v1/blocks", {"height": "96708412"})
        blocks = await client.decode_response(response, BlocksResponse)
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from findapi.core.services.auth_service import AuthService
from findapi.domain.events.api_events import EventHook
from findapi.domain.interfaces.transport import Transport
from findapi.domain.models.auth import Credentials
from findapi.domain.models.common import FIND_API_URL, ApiPath, HttpMethod
from findapi.domain.models.request import RequestDescriptor
from findapi.infrastructure.auth.token_cache import TokenCache
from findapi.infrastructure.http.decode import decode_response
from findapi.infrastructure.http.transport import DEFAULT_TIMEOUT_SECONDS, HttpxTransport
from findapi.infrastructure.resilience.dispatcher import DEFAULT_MAX_ATTEMPTS, RequestDispatcher

logger = logging.getLogger(__name__)


class Client:
    """Client for interacting with the FindLabs API."""

    def __init__(
        self,
        username: str,
        password: str,
        *,
        base_url: str = FIND_API_URL,
        transport: Optional[Transport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        token_cache: Optional[TokenCache] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        event_hook: Optional[EventHook] = None,
    ):
        """Initializes the client.

        Args:
            username: API username.
            password: API password.
            base_url: Overrides the API base URL.
            transport: Overrides the transport (e.g. a test double).
            http_client: Preconfigured httpx client for the default transport.
                Ignored when `transport` is given.
            timeout: Request timeout of the default transport, in seconds.
            token_cache: Preconfigured token cache (e.g. pre-seeded in tests).
            max_attempts: Total tries for a rate-limited request.
            event_hook: Optional observer for request and refresh events.
        """
        if not username:
            raise ValueError("username is required")

        self.credentials = Credentials(username, password)
        self.base_url = base_url.rstrip("/")
        self.transport = transport or HttpxTransport(http_client, timeout=timeout)

        self.auth = AuthService(self, self.credentials)
        self.token_cache = token_cache or TokenCache(self.auth, event_hook=event_hook)
        self.dispatcher = RequestDispatcher(
            self.transport,
            base_url=self.base_url,
            token_cache=self.token_cache,
            max_attempts=max_attempts,
            event_hook=event_hook,
        )
        logger.debug(f"Client initialized for {self.base_url} as '{username}'")

    async def do_request(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Performs an authenticated request with rate-limit handling.

        Returns:
            The raw response; pass it to `decode_response`.
        """
        descriptor = RequestDescriptor(
            method=HttpMethod(method), path=ApiPath(path), query=query or {}, requires_auth=True
        )
        return await self.dispatcher.send(descriptor)

    async def do_request_with_basic_auth(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, str]] = None,
        credentials: Optional[Credentials] = None,
    ) -> httpx.Response:
        """Performs a request authenticated with Basic auth instead of a bearer token.

        Used by the auth service to mint tokens. Defaults to the client's
        own credentials.
        """
        credentials = credentials or self.credentials
        descriptor = RequestDescriptor(
            method=HttpMethod(method), path=ApiPath(path), query=query or {}, requires_auth=False
        )
        return await self.dispatcher.send(
            descriptor, headers={"Authorization": credentials.basic_auth_header()}
        )

    async def decode_response(self, response: httpx.Response, shape: Optional[Any] = None) -> Any:
        """Decodes a JSON response into `shape`. See `decode_response`."""
        return await decode_response(response, shape)

    async def aclose(self) -> None:
        """Closes the underlying transport."""
        await self.transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
