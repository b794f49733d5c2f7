"""Interface for presenting results to the user.

Defines the contract for displaying information, errors, tokens and
response payloads, allowing different UI implementations.
"""

import abc
from typing import Any

# Import relevant domain models
from findapi.domain.models.auth import TokenResponse

class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a response payload to the user.

        Args:
            output: Decoded JSON (dict/list) or plain text.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_token(self, token: TokenResponse, show_secret: bool = True) -> None:
        """Displays the details of a freshly generated token.

        Args:
            token: The token payload returned by the credential exchange.
            show_secret: Whether to print the full access token.
        """
        pass
