"""Domain models for authentication.

Includes the long-lived `Credentials`, the short-lived bearer `Token`
held by the token cache, and the `TokenResponse` payload returned by the
credential exchange endpoint.
"""

import base64
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class Credentials:
    """Immutable username/password pair used only to mint tokens."""
    username: str
    password: str = field(repr=False)

    def basic_auth_header(self) -> str:
        """Returns the value for an ``Authorization: Basic ...`` header."""
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class Token:
    """A bearer token and its validity window.

    Tokens are never mutated; the cache swaps in a new instance on refresh.
    """
    value: str = field(repr=False)
    issued_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Token value must not be empty.")
        if self.expires_at <= self.issued_at:
            raise ValueError(
                f"Token expiry ({self.expires_at.isoformat()}) must be after "
                f"its issue time ({self.issued_at.isoformat()})."
            )

    def is_valid(self, now: datetime, margin: timedelta = timedelta(0)) -> bool:
        """True if the token is still usable for at least `margin` from `now`."""
        return now + margin < self.expires_at


@dataclass
class TokenResponse:
    """Payload of ``POST /auth/v1/generate``."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0
    exp: int = 0          # absolute expiry, Unix seconds
    iat: int = 0          # issued-at, Unix seconds
    refresh_token: str = ""
    scope: str = ""

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)

    @property
    def issued_at(self) -> Optional[datetime]:
        if not self.iat:
            return None
        return datetime.fromtimestamp(self.iat, tz=timezone.utc)

    def to_token(self, now: datetime) -> Token:
        """Builds a cacheable Token. Falls back to `now` when `iat` is missing.

        Raises:
            ValueError: If the payload does not describe a valid token.
        """
        return Token(
            value=self.access_token,
            issued_at=self.issued_at or now,
            expires_at=self.expires_at,
        )
