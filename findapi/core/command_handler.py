"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and delegates
the work to the client and its auth service, rendering results and
errors through the UserInterface.
"""

import logging
from datetime import timedelta
from typing import Any, Mapping, Optional

from findapi.core.client import Client
from findapi.domain.errors import FindApiError, is_rate_limit_error
from findapi.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class CommandHandler:
    """Handles incoming commands and delegates to the client."""

    def __init__(self, client: Client, ui: UserInterface):
        self.client = client
        self.ui = ui

    async def handle_generate_token(self, validity: timedelta, show_secret: bool = True) -> int:
        """Handles the 'generate-token' command."""
        logger.info(f"Handling 'generate-token' command with validity {validity}")
        try:
            token = await self.client.auth.generate_token(validity)
        except ValueError as e:
            self.ui.display_error(str(e))
            return EXIT_FAILURE
        except FindApiError as e:
            logger.error(f"Token generation failed: {e}")
            self._display_api_failure("Token generation failed", e)
            return EXIT_FAILURE

        self.ui.display_token(token, show_secret=show_secret)
        return EXIT_OK

    async def handle_request(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, str]] = None,
    ) -> int:
        """Handles the 'request' command: one authenticated call, JSON printed."""
        logger.info(f"Handling 'request' command: {method.upper()} {path}")
        try:
            response = await self.client.do_request(method, path, query)
            payload = await self.client.decode_response(response, Any)
        except FindApiError as e:
            logger.error(f"Request {method.upper()} {path} failed: {e}")
            self._display_api_failure("Request failed", e)
            return EXIT_FAILURE

        self.ui.display_output(payload)
        return EXIT_OK

    def _display_api_failure(self, prefix: str, error: FindApiError) -> None:
        self.ui.display_error(f"{prefix}: {error}")
        if is_rate_limit_error(error):
            self.ui.display_warning("The API is rate limiting this account; try again later.")
