import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import httpx
import pytest
from typer.testing import CliRunner

from findapi.core.client import Client
from findapi.domain.interfaces.credential_exchange import CredentialExchange
from findapi.domain.models.auth import Token, TokenResponse
from findapi.infrastructure.config import settings
from findapi.infrastructure.http.transport import HttpxTransport

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeExchange(CredentialExchange):
    """Credential exchange double that counts calls.

    `delay` keeps each call pending for a few loop iterations so concurrent
    callers overlap; `error` makes every call fail.
    """

    def __init__(self, now: datetime = FIXED_NOW, lifetime: timedelta = timedelta(minutes=10),
                 delay: int = 0, error: Optional[Exception] = None):
        self.now = now
        self.lifetime = lifetime
        self.delay = delay
        self.error = error
        self.calls: List[timedelta] = []

    async def generate_token(self, validity: timedelta) -> TokenResponse:
        self.calls.append(validity)
        for _ in range(self.delay):
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        issued = int(self.now.timestamp())
        return TokenResponse(
            access_token=f"token-{len(self.calls)}",
            expires_in=int(self.lifetime.total_seconds()),
            exp=issued + int(self.lifetime.total_seconds()),
            iat=issued,
        )


class SleepRecorder:
    """Replacement for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_token() -> Callable[..., Token]:
    """Factory for tokens relative to FIXED_NOW."""
    def _make(value: str = "cached-token", expires_in: timedelta = timedelta(minutes=10)) -> Token:
        return Token(value=value, issued_at=FIXED_NOW, expires_at=FIXED_NOW + expires_in)
    return _make


@pytest.fixture
def fake_exchange() -> FakeExchange:
    return FakeExchange()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_client():
    """Builds a Client whose HTTP traffic goes to `handler` through httpx.MockTransport."""
    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> Client:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Client(
            kwargs.pop("username", "alice"),
            kwargs.pop("password", "s3cret"),
            transport=HttpxTransport(http_client),
            **kwargs,
        )
    return _make


def token_json(value: str = "jwt-abc", lifetime: int = 600, now: datetime = FIXED_NOW) -> dict:
    """Body of a successful POST /auth/v1/generate response."""
    issued = int(now.timestamp())
    return {
        "access_token": value,
        "token_type": "Bearer",
        "expires_in": lifetime,
        "exp": issued + lifetime,
        "iat": issued,
    }


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch):
    """Ensure tests never see real credentials or a previously loaded config."""
    for key in (settings.USERNAME_KEY, settings.PASSWORD_KEY, settings.BASE_URL_KEY, "LOGGING_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()


@pytest.fixture
def exchange_factory():
    """The FakeExchange class, for tests that need custom lifetimes, delays or errors."""
    return FakeExchange


@pytest.fixture(name="token_json")
def token_json_fixture():
    """Factory for successful token exchange bodies."""
    return token_json
