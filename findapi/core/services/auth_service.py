"""Application service for the Auth API.

Trades the client's username/password for a short-lived JWT through
``POST /auth/v1/generate``. This is the credential exchange the token
cache calls on refresh; it authenticates with Basic auth, never with a
bearer token.
"""

import logging
from datetime import timedelta
from typing import Any, Mapping, Optional, Protocol

import httpx

from findapi.domain.interfaces.credential_exchange import DEFAULT_TOKEN_VALIDITY, CredentialExchange
from findapi.domain.models.auth import Credentials, TokenResponse
from findapi.domain.models.common import AUTH_GENERATE_PATH
from findapi.utils.durations import format_duration

logger = logging.getLogger(__name__)

MAX_TOKEN_VALIDITY = timedelta(hours=168)


class BasicAuthClient(Protocol):
    """The part of the client the auth service needs."""

    async def do_request_with_basic_auth(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, str]],
        credentials: Credentials,
    ) -> httpx.Response:
        ...

    async def decode_response(self, response: httpx.Response, shape: Optional[Any] = None) -> Any:
        ...


class AuthService(CredentialExchange):
    """Handles Auth API operations."""

    def __init__(self, client: BasicAuthClient, credentials: Credentials):
        self.client = client
        self.credentials = credentials

    async def generate_token(self, validity: timedelta = DEFAULT_TOKEN_VALIDITY) -> TokenResponse:
        """Generates a new JWT valid for `validity` (at most 168 hours).

        Raises:
            ValueError: If the requested validity is not positive or too long.
            APIError: If the server rejected the credentials.
            TransportError, RateLimitError, DecodeError: See the dispatcher
                and decode contract.
        """
        if validity <= timedelta(0):
            raise ValueError(f"Token validity must be positive, got {validity}.")
        if validity > MAX_TOKEN_VALIDITY:
            raise ValueError(f"Token validity must not exceed {MAX_TOKEN_VALIDITY}, got {validity}.")

        query = {"expiry": format_duration(validity)}
        logger.debug(f"Requesting token for user '{self.credentials.username}' with expiry={query['expiry']}")
        response = await self.client.do_request_with_basic_auth(
            "POST", AUTH_GENERATE_PATH, query, self.credentials
        )
        return await self.client.decode_response(response, TokenResponse)
