import asyncio

import httpx

from findapi.infrastructure.http.transport import DEFAULT_USER_AGENT, HttpxTransport, build_async_client


def test_execute_forwards_method_headers_and_params():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async def scenario():
        client = build_async_client(transport=httpx.MockTransport(handler))
        transport = HttpxTransport(client)
        response = await transport.execute(
            "GET", "https://api.test/simple/v1/blocks",
            headers={"Authorization": "Bearer t"}, params={"height": "9"},
        )
        await transport.aclose()
        assert not client.is_closed
        await client.aclose()
        return response

    response = asyncio.run(scenario())

    assert response.status_code == 200
    assert seen[0].method == "GET"
    assert seen[0].url.params["height"] == "9"
    assert seen[0].headers["Authorization"] == "Bearer t"
    assert seen[0].headers["User-Agent"] == DEFAULT_USER_AGENT


def test_owned_client_is_closed():
    async def scenario():
        transport = HttpxTransport(timeout=5.0)
        await transport.aclose()
        return transport.client.is_closed

    assert asyncio.run(scenario())
