import base64
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest
from typer.testing import CliRunner

# Import the app instance from main
from findapi.main import app
from findapi.domain.models.auth import TokenResponse
from findapi.infrastructure.cli.display import ConsoleDisplay

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# make_client: builds a Client on top of httpx.MockTransport
# token_json: factory for exchange response bodies
# isolated_configuration: clears FINDAPI_* variables and loaded config


class RecordingApi:
    def __init__(self, token_json):
        self.token_json = token_json
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/auth/v1/generate":
            return httpx.Response(200, json=self.token_json(value="jwt-cli", now=datetime.now(timezone.utc)))
        if request.url.path == "/missing":
            return httpx.Response(404, text="not found")
        return httpx.Response(200, json={"height": request.url.params.get("height"), "txs": 3})


@pytest.fixture
def api(token_json):
    return RecordingApi(token_json)


@pytest.fixture
def cli_environment(mocker, make_client, api):
    """Wires the CLI to the fake API, skipping config files and root logger changes."""
    mocker.patch("findapi.main.load_configuration")
    mocker.patch("findapi.main.setup_logging")
    mocker.patch("findapi.main.create_client", side_effect=lambda: make_client(api))
    return api


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch("findapi.main.ConsoleDisplay", return_value=mock)
    return mock


def test_generate_token_command_flow(runner: CliRunner, cli_environment, mock_console_display: MagicMock):
    result = runner.invoke(app, ["generate-token", "--expiry", "1h"])

    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"

    request = cli_environment.requests[0]
    assert request.url.path == "/auth/v1/generate"
    assert request.url.params["expiry"] == "1h0m0s"
    assert base64.b64decode(request.headers["Authorization"].split(" ", 1)[1]) == b"alice:s3cret"

    mock_console_display.display_token.assert_called_once()
    token = mock_console_display.display_token.call_args.args[0]
    assert isinstance(token, TokenResponse)
    assert token.access_token == "jwt-cli"
    assert mock_console_display.display_token.call_args.kwargs == {"show_secret": True}
    mock_console_display.display_error.assert_not_called()


def test_generate_token_default_expiry_and_masking(runner: CliRunner, cli_environment, mock_console_display: MagicMock):
    result = runner.invoke(app, ["generate-token", "--hide-token"])

    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"
    assert cli_environment.requests[0].url.params["expiry"] == "10m0s"
    assert mock_console_display.display_token.call_args.kwargs == {"show_secret": False}


def test_generate_token_prints_table(runner: CliRunner, cli_environment):
    result = runner.invoke(app, ["generate-token"])

    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"
    assert "Access Token" in result.stdout
    assert "jwt-cli" in result.stdout
    assert "Bearer" in result.stdout


def test_request_command_flow(runner: CliRunner, cli_environment, mock_console_display: MagicMock):
    result = runner.invoke(app, ["request", "GET", "/simple/v1/blocks", "--query", "height=96708412"])

    assert result.exit_code == 0, f"CLI command failed: {result.stdout}"

    exchange, data = cli_environment.requests
    assert exchange.url.path == "/auth/v1/generate"
    assert data.url.path == "/simple/v1/blocks"
    assert data.url.params["height"] == "96708412"
    assert data.headers["Authorization"] == "Bearer jwt-cli"
    mock_console_display.display_output.assert_called_once_with({"height": "96708412", "txs": 3})


def test_request_command_api_error(runner: CliRunner, cli_environment, mock_console_display: MagicMock):
    result = runner.invoke(app, ["request", "GET", "/missing"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once_with(
        "Request failed: API error (status 404): not found"
    )


def test_request_command_rejects_malformed_query(runner: CliRunner, cli_environment):
    result = runner.invoke(app, ["request", "GET", "/blocks", "--query", "height"])

    assert result.exit_code == 2
    assert cli_environment.requests == []


def test_invalid_expiry_is_rejected(runner: CliRunner, cli_environment):
    result = runner.invoke(app, ["generate-token", "--expiry", "soon"])

    assert result.exit_code == 2
    assert cli_environment.requests == []


def test_expiry_above_maximum_fails(runner: CliRunner, cli_environment, mock_console_display: MagicMock):
    result = runner.invoke(app, ["generate-token", "--expiry", "200h"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once()
    assert cli_environment.requests == []


def test_missing_credentials(runner: CliRunner, mocker, mock_console_display: MagicMock):
    mocker.patch("findapi.main.load_configuration")
    mocker.patch("findapi.main.setup_logging")

    result = runner.invoke(app, ["generate-token"])

    assert result.exit_code == 1
    message = mock_console_display.display_error.call_args.args[0]
    assert "FINDAPI_USERNAME" in message
