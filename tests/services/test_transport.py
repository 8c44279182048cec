"""Tests for the aiohttp transport against a local server"""

import asyncio

import pytest
import pytest_asyncio
import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer

from kraken_client.core.exceptions import (
    RequestTimeoutError,
    ResponseParseError,
    TransportError,
)
from kraken_client.models.request import Credentials, HttpMethod, RequestOptions, Visibility
from kraken_client.models.result import ErrorKind
from kraken_client.services.exchange.dispatcher import RequestDispatcher
from kraken_client.services.exchange.transport import AiohttpTransport

from conftest import TIME_ENVELOPE

pytestmark = pytest.mark.asyncio


async def time_handler(request):
    return web.json_response(TIME_ENVELOPE)


async def echo_handler(request):
    body = await request.text()
    return web.json_response({
        "error": [],
        "result": {
            "method": request.method,
            "body": body,
            "api_key": request.headers.get("API-Key"),
            "content_type": request.headers.get("Content-Type"),
            "query": dict(request.query),
        },
    })


async def slow_handler(request):
    await asyncio.sleep(2)
    return web.json_response(TIME_ENVELOPE)


async def html_handler(request):
    return web.Response(text="<html>maintenance</html>", content_type="text/html")


async def list_handler(request):
    return web.json_response(["not", "an", "object"])


async def undecodable_handler(request):
    return web.Response(body=b'{"error": [], "result": "\xff\xfe"}', content_type="application/json")


async def rejected_handler(request):
    return web.json_response({"error": ["EGeneral:Permission denied"]}, status=403)


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/0/public/Time", time_handler)
    app.router.add_get("/0/public/Assets", echo_handler)
    app.router.add_post("/0/private/Balance", echo_handler)
    app.router.add_get("/0/public/Slow", slow_handler)
    app.router.add_get("/0/public/Html", html_handler)
    app.router.add_get("/0/public/List", list_handler)
    app.router.add_get("/0/public/Undecodable", undecodable_handler)
    app.router.add_post("/0/private/Rejected", rejected_handler)

    test_server = LocalServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


def options_for(server, path, method=HttpMethod.GET, headers=None, timeout=4.0) -> RequestOptions:
    return RequestOptions(
        host=server.host,
        port=server.port,
        protocol="http",
        path=path,
        method=method,
        headers=headers or {},
        timeout=timeout,
    )


async def test_get_parses_envelope(server):
    async with AiohttpTransport() as transport:
        data = await transport.send(options_for(server, "/0/public/Time"))

    assert data == TIME_ENVELOPE


async def test_get_sends_query_string(server):
    async with AiohttpTransport() as transport:
        data = await transport.send(options_for(server, "/0/public/Assets?asset=ETH%2CXRP"))

    assert data["result"]["query"] == {"asset": "ETH,XRP"}


async def test_post_sends_body_and_headers(server):
    body = "nonce=1616492376594000"
    headers = {
        "API-Key": "test-api-key",
        "Content-Type": "application/x-www-form-urlencoded",
        "Content-Length": str(len(body)),
    }

    async with AiohttpTransport() as transport:
        data = await transport.send(
            options_for(server, "/0/private/Balance", HttpMethod.POST, headers), body
        )

    assert data["result"]["method"] == "POST"
    assert data["result"]["body"] == body
    assert data["result"]["api_key"] == "test-api-key"
    assert data["result"]["content_type"] == "application/x-www-form-urlencoded"


async def test_error_status_still_returns_body(server):
    async with AiohttpTransport() as transport:
        data = await transport.send(options_for(server, "/0/private/Rejected", HttpMethod.POST), "")

    assert data == {"error": ["EGeneral:Permission denied"]}


async def test_timeout(server):
    async with AiohttpTransport() as transport:
        with pytest.raises(RequestTimeoutError) as exc_info:
            await transport.send(options_for(server, "/0/public/Slow", timeout=0.1))

    assert exc_info.value.details["path"] == "/0/public/Slow"
    assert isinstance(exc_info.value, TransportError)


async def test_non_json_body(server):
    async with AiohttpTransport() as transport:
        with pytest.raises(ResponseParseError):
            await transport.send(options_for(server, "/0/public/Html"))


async def test_non_object_body(server):
    async with AiohttpTransport() as transport:
        with pytest.raises(ResponseParseError):
            await transport.send(options_for(server, "/0/public/List"))


async def test_body_not_utf8(server):
    async with AiohttpTransport() as transport:
        with pytest.raises(ResponseParseError) as exc_info:
            await transport.send(options_for(server, "/0/public/Undecodable"))

    assert isinstance(exc_info.value.original_exception, UnicodeDecodeError)


async def test_body_not_utf8_is_transport_result(server):
    creds = Credentials(host=server.host, port=server.port, protocol="http")

    async with AiohttpTransport() as transport:
        dispatcher = RequestDispatcher(credentials=creds, transport=transport)
        result = await dispatcher.send(Visibility.PUBLIC, "Undecodable")

    assert result.kind == ErrorKind.TRANSPORT
    with pytest.raises(ResponseParseError):
        result.unwrap()


async def test_connection_refused():
    closed = LocalServer(web.Application())
    await closed.start_server()
    options = options_for(closed, "/0/public/Time", timeout=2.0)
    await closed.close()

    async with AiohttpTransport() as transport:
        with pytest.raises(TransportError) as exc_info:
            await transport.send(options)

    assert exc_info.value.original_exception is not None


async def test_session_reused_and_closed(server):
    transport = AiohttpTransport()

    await transport.send(options_for(server, "/0/public/Time"))
    session = transport.session
    await transport.send(options_for(server, "/0/public/Time"))

    assert transport.session is session
    await transport.close()
    assert session.closed


async def test_borrowed_session_is_left_open(server):
    async with aiohttp.ClientSession() as session:
        transport = AiohttpTransport(session=session)
        await transport.send(options_for(server, "/0/public/Time"))
        await transport.close()

        assert not session.closed
