"""Bearer token cache with stampede-free refresh.

Supplies a token that stays valid for at least a safety margin from now,
minting a new one through the credential exchange when needed. Refreshes
are serialized with a reader-writer lock and a double check, so N
concurrent callers hitting a stale token trigger a single exchange call.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from findapi.domain.errors import TokenRefreshError
from findapi.domain.events.api_events import (
    EventHook, TokenRefreshFailed, TokenRefreshed, dispatch_event
)
from findapi.domain.interfaces.credential_exchange import DEFAULT_TOKEN_VALIDITY, CredentialExchange
from findapi.domain.models.auth import Token
from findapi.infrastructure.concurrency.rw_lock import ReaderWriterLock

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_MARGIN = timedelta(minutes=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCache:
    """Holds the current bearer token and refreshes it on demand."""

    def __init__(
        self,
        exchange: CredentialExchange,
        *,
        safety_margin: timedelta = DEFAULT_SAFETY_MARGIN,
        validity: timedelta = DEFAULT_TOKEN_VALIDITY,
        token: Optional[Token] = None,
        clock: Optional[Callable[[], datetime]] = None,
        event_hook: Optional[EventHook] = None,
    ):
        """Initializes the TokenCache.

        Args:
            exchange: Collaborator that mints new tokens.
            safety_margin: Minimum remaining lifetime for a cached token to be reused.
            validity: Lifetime requested from the exchange on refresh.
            token: Optional pre-seeded token.
            clock: Returns the current time (timezone-aware). Defaults to UTC now.
            event_hook: Optional observer for refresh events.
        """
        self._exchange = exchange
        self.safety_margin = safety_margin
        self.validity = validity
        self._token = token
        self._clock = clock or utc_now
        self._event_hook = event_hook
        self._lock = ReaderWriterLock()

    @property
    def current(self) -> Optional[Token]:
        """The cached token, valid or not."""
        return self._token

    def seed(self, token: Token) -> None:
        """Replaces the cached token without calling the exchange."""
        self._token = token

    def invalidate(self) -> None:
        """Drops the cached token so the next call refreshes."""
        self._token = None

    def _usable(self, token: Optional[Token]) -> bool:
        return token is not None and token.is_valid(self._clock(), self.safety_margin)

    async def get_valid(self) -> str:
        """Returns a token value valid for at least the safety margin.

        Raises:
            TokenRefreshError: If a refresh was needed and the exchange failed.
                The cached token is left as it was.
        """
        async with self._lock.read():
            token = self._token
            if self._usable(token):
                return token.value

        async with self._lock.write():
            # Another task may have refreshed while we waited for the lock.
            token = self._token
            if self._usable(token):
                logger.debug("Token already refreshed by a concurrent caller.")
                return token.value

            token = await self._refresh()
            self._token = token
            return token.value

    async def _refresh(self) -> Token:
        logger.info(f"Refreshing access token (requested validity {self.validity}).")
        try:
            response = await self._exchange.generate_token(self.validity)
            token = response.to_token(now=self._clock())
        except Exception as e:
            logger.error(f"Token refresh failed: {type(e).__name__}: {e}")
            dispatch_event(
                TokenRefreshFailed(error_type=type(e).__name__, error_message=str(e)),
                self._event_hook, logger,
            )
            raise TokenRefreshError(f"token refresh failed: {e}", cause=e) from e

        logger.info(f"Access token refreshed, expires at {token.expires_at.isoformat()}.")
        dispatch_event(
            TokenRefreshed(expires_at=token.expires_at.timestamp()),
            self._event_hook, logger,
        )
        return token
