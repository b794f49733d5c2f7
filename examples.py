#!/usr/bin/env python3
"""
Examples of programmatic usage of the findapi client.

This file demonstrates how to use the client directly, which might be useful
for embedding in other applications or for building endpoint helpers on top
of `do_request` and `decode_response`.

Usage:
    FINDAPI_USERNAME=... FINDAPI_PASSWORD=... python examples.py
"""

import asyncio
import logging
from datetime import timedelta
from typing import Any, Dict

from findapi import Client, FindApiError, is_rate_limit_error
from findapi.domain.events.api_events import DomainEvent
from findapi.domain.models.common import FIND_API_URL
from findapi.infrastructure.cli.display import ConsoleDisplay
from findapi.infrastructure.config.settings import get_base_url, get_credentials, load_configuration
from findapi.infrastructure.monitoring.logger_setup import setup_logging

ui = ConsoleDisplay()


def print_event(event: DomainEvent) -> None:
    """Event hook printing every request and refresh event."""
    ui.display_info(f"{type(event).__name__}: {event}")


async def example_generate_token(client: Client):
    """Example of minting a token explicitly."""
    ui.display_info("Generating a token valid for one hour...")
    token = await client.auth.generate_token(timedelta(hours=1))
    ui.display_token(token, show_secret=False)


async def example_authenticated_request(client: Client):
    """Example of an authenticated request; the token is fetched and cached transparently."""
    ui.display_info("Fetching block 96708412...")
    response = await client.do_request("GET", "/simple/v1/blocks", {"height": "96708412"})
    blocks: Dict[str, Any] = await client.decode_response(response, Dict[str, Any])
    ui.display_output(blocks, title="Blocks")


async def example_concurrent_requests(client: Client):
    """Example of concurrent requests sharing one token refresh."""
    ui.display_info("Issuing five concurrent requests...")
    heights = [str(96708412 + i) for i in range(5)]
    responses = await asyncio.gather(
        *(client.do_request("GET", "/simple/v1/blocks", {"height": h}) for h in heights)
    )
    for height, response in zip(heights, responses):
        await client.decode_response(response)
        ui.display_info(f"Block {height}: HTTP {response.status_code}")


async def main():
    """Run all examples."""
    load_configuration()
    setup_logging(log_level=logging.INFO)

    username, password = get_credentials()
    if not username or not password:
        ui.display_error("Set FINDAPI_USERNAME and FINDAPI_PASSWORD to run the examples.")
        return

    async with Client(username, password, base_url=get_base_url(FIND_API_URL), event_hook=print_event) as client:
        try:
            await example_generate_token(client)
            await example_authenticated_request(client)
            await example_concurrent_requests(client)
        except FindApiError as e:
            ui.display_error(f"Example failed: {e}")
            if is_rate_limit_error(e):
                ui.display_warning("Rate limited; wait a moment and run again.")


if __name__ == "__main__":
    asyncio.run(main())
