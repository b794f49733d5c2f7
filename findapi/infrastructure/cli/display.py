import logging
from datetime import datetime, timezone
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.text import Text
from rich.table import Table

from findapi.domain.interfaces.user_interface import UserInterface
from findapi.domain.models.auth import TokenResponse
from findapi.utils.durations import mask_secret

logger = logging.getLogger(__name__)


def _format_unix(seconds: int) -> str:
    if not seconds:
        return "-"
    return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self.console = console or Console()

    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Displays a response payload. JSON-compatible data is pretty-printed.

        Args:
            output: Decoded JSON (dict/list) or plain text.
            **kwargs: Additional arguments including:
                - title: Optional heading printed above the payload
        """
        title = kwargs.get("title")
        if title:
            self.console.print(f"[bold cyan]{title}[/bold cyan]")

        if isinstance(output, (dict, list)):
            self.console.print_json(data=output)
        else:
            self.console.print(Text(str(output)))

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message.

        Args:
            info_message: The informational message to display.
        """
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message.

        Args:
            warning_message: The warning message to display.
        """
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_token(self, token: TokenResponse, show_secret: bool = True) -> None:
        """Displays token details as a table.

        Args:
            token: The generated token.
            show_secret: Print the full access token instead of a masked prefix.
        """
        access_token = token.access_token if show_secret else mask_secret(token.access_token)

        table = Table(show_header=False, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Field", style="bold cyan")
        table.add_column("Value", overflow="fold")
        table.add_row("Access Token", access_token)
        table.add_row("Token Type", token.token_type)
        table.add_row("Expires In", f"{token.expires_in} seconds")
        table.add_row("Expiry Time (Unix)", str(token.exp))
        table.add_row("Issued At (Unix)", str(token.iat))
        table.add_row("Expires At", _format_unix(token.exp))
        table.add_row("Issued At", _format_unix(token.iat))
        self.console.print(table)
