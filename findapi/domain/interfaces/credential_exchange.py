"""Interface for the credential exchange.

The token cache depends on this contract to trade long-lived credentials
for a short-lived bearer token.
"""

import abc
from datetime import timedelta

from findapi.domain.models.auth import TokenResponse

DEFAULT_TOKEN_VALIDITY = timedelta(minutes=10)


class CredentialExchange(abc.ABC):
    """Abstract Base Class for minting bearer tokens."""

    @abc.abstractmethod
    async def generate_token(self, validity: timedelta) -> TokenResponse:
        """Requests a new token valid for `validity`.

        Args:
            validity: Requested lifetime of the token.

        Returns:
            The token payload, including its absolute expiry.

        Raises:
            FindApiError: If the exchange fails.
        """
        pass
