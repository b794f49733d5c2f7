"""Concrete implementation of the Transport interface using httpx.

Centralizes timeouts and default headers so every request behaves the
same. A preconfigured ``httpx.AsyncClient`` can be injected, e.g. one
built on ``httpx.MockTransport`` in tests.
"""

import logging
from typing import Mapping, Optional

import httpx

from findapi.domain.interfaces.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "findapi-python/0.1"


def build_async_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Creates an ``httpx.AsyncClient`` with the library defaults."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": user_agent},
        transport=transport,
    )


class HttpxTransport(Transport):
    """httpx implementation of the Transport interface."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, *, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        """Initializes the transport.

        Args:
            client: Optional preconfigured client. If omitted, one is created
                and owned (closed by `aclose`) by this transport.
            timeout: Timeout in seconds for the client created here.
        """
        self._owns_client = client is None
        self.client = client or build_async_client(timeout)

    async def execute(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        logger.debug(f"HTTP {method} {url} params={dict(params or {})}")
        return await self.client.request(method, url, headers=headers, params=params)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
