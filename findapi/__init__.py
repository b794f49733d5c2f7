"""Python client for the FindLabs API.

Handles bearer-token authentication, transparent token refresh and
rate-limit retries so endpoint code only builds requests and decodes
responses.
"""

from findapi.core.client import Client
from findapi.domain.errors import (
    APIError,
    DecodeError,
    FindApiError,
    RateLimitError,
    TokenRefreshError,
    TransportError,
    is_api_error,
    is_rate_limit_error,
)
from findapi.domain.models.auth import Credentials, Token, TokenResponse
from findapi.domain.models.common import FIND_API_URL

__version__ = "0.1.0"

__all__ = [
    "Client",
    "Credentials",
    "Token",
    "TokenResponse",
    "FIND_API_URL",
    "FindApiError",
    "TransportError",
    "TokenRefreshError",
    "RateLimitError",
    "APIError",
    "DecodeError",
    "is_rate_limit_error",
    "is_api_error",
]
