"""Main entry point for the findapi command line tool.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Annotated, Any, Callable, Coroutine, Dict, List, Optional

import typer

# --- Core Layer ---
from findapi.core.client import Client
from findapi.core.command_handler import EXIT_FAILURE, CommandHandler

# --- Domain Layer ---
from findapi.domain.models.common import FIND_API_URL

# --- Infrastructure Layer ---
# Config
from findapi.infrastructure.config.settings import (
    PASSWORD_KEY,
    USERNAME_KEY,
    get_base_url,
    get_config,
    get_credentials,
    get_log_level,
    load_configuration,
)
# UI
from findapi.infrastructure.cli.display import ConsoleDisplay
# Monitoring
from findapi.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, setup_logging
from findapi.utils.durations import parse_duration

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY = "10m"


class MissingCredentialsError(Exception):
    """Username or password is not configured."""


# --- Dependency Injection Container (Manual) ---

def create_client() -> Client:
    """Builds the API client from the loaded configuration."""
    username, password = get_credentials()
    if not username or not password:
        raise MissingCredentialsError(
            f"Credentials not configured. Set {USERNAME_KEY} and {PASSWORD_KEY} "
            f"in the environment, a .env file, or ~/.findapi/config.yaml."
        )
    return Client(username, password, base_url=get_base_url(FIND_API_URL))


def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up all dependencies for one command.

    This acts as the Composition Root. Runs per command rather than at import
    time, so `--help` works without credentials.
    """
    # 1. Load Configuration First
    load_configuration()
    setup_logging(
        log_level=get_log_level(),
        log_format=get_config("logging.format", DEFAULT_LOG_FORMAT),
        log_file=get_config("logging.file"),
    )
    logger.debug("Configuration and logging initialized.")

    # 2. Instantiate UI, client and handler
    dependencies: Dict[str, Any] = {"ui": ConsoleDisplay()}
    try:
        dependencies["client"] = create_client()
    except (MissingCredentialsError, ValueError) as e:
        logger.error(f"Failed to initialize client: {e}")
        dependencies["ui"].display_error(str(e))
        raise typer.Exit(code=EXIT_FAILURE)

    dependencies["command_handler"] = CommandHandler(
        client=dependencies["client"], ui=dependencies["ui"]
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="findapi",
    help="Command line client for the FindLabs API: mint tokens and issue authenticated requests.",
    add_completion=False,
)


# --- Helper for Running Async Commands ---
def run_command(command: Callable[[CommandHandler], Coroutine[Any, Any, int]]) -> None:
    """Runs an async handler method, closes the client, and exits with its code."""
    dependencies = create_dependencies()

    async def _run() -> int:
        async with dependencies["client"]:
            return await command(dependencies["command_handler"])

    exit_code = asyncio.run(_run())
    if exit_code:
        raise typer.Exit(code=exit_code)


def _parse_expiry(value: str) -> timedelta:
    try:
        return parse_duration(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _parse_query(pairs: Optional[List[str]]) -> Dict[str, str]:
    query: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got '{pair}'", param_hint="--query")
        query[key] = value
    return query


# --- CLI Commands ---

@app.command(name="generate-token")
def generate_token_command(
    expiry: Annotated[
        str,
        typer.Option("--expiry", "-e", help="Token validity, e.g. '90s', '10m', '1h30m' (max 168h).")
    ] = DEFAULT_EXPIRY,
    hide_token: Annotated[
        bool,
        typer.Option("--hide-token", help="Mask the access token in the output.")
    ] = False,
):
    """Generate a new JWT for the configured credentials."""
    validity = _parse_expiry(expiry)
    run_command(lambda handler: handler.handle_generate_token(validity, show_secret=not hide_token))


@app.command(name="request")
def request_command(
    method: Annotated[str, typer.Argument(help="HTTP method, e.g. GET.")],
    path: Annotated[str, typer.Argument(help="API path, e.g. /simple/v1/blocks.")],
    query: Annotated[
        Optional[List[str]],
        typer.Option("--query", "-q", help="Query parameter as key=value. Repeatable.")
    ] = None,
):
    """Perform an authenticated request and print the JSON response."""
    params = _parse_query(query)
    run_command(lambda handler: handler.handle_request(method, path, params))


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
