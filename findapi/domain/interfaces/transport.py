"""Interface for the HTTP transport.

Defines the contract the dispatcher uses to put a request on the wire.
Implementations may wrap a real HTTP client or act as a test double.
"""

import abc
from typing import Mapping, Optional

import httpx


class Transport(abc.ABC):
    """Abstract Base Class for issuing a single HTTP request."""

    @abc.abstractmethod
    async def execute(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Sends one HTTP request and returns the response, whatever its status.

        Args:
            method: HTTP method ('GET', 'POST', ...).
            url: Absolute URL of the request.
            headers: Request headers.
            params: Query parameters to encode into the URL.

        Returns:
            The HTTP response with status, headers and body.

        Raises:
            httpx.RequestError: If no usable response could be obtained.
        """
        pass

    async def aclose(self) -> None:
        """Releases any resources held by the transport."""
        return None
