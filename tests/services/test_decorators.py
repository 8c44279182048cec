"""Tests for API call logging"""

import logging
from unittest.mock import AsyncMock

import pytest

from kraken_client.core.exceptions import TransportError
from kraken_client.models.request import Credentials, Visibility
from kraken_client.services.exchange.dispatcher import RequestDispatcher

from conftest import TEST_KEY, TEST_SECRET, TIME_ENVELOPE

pytestmark = pytest.mark.asyncio


def make_dispatcher(transport) -> RequestDispatcher:
    return RequestDispatcher(
        credentials=Credentials(api_key=TEST_KEY, api_secret=TEST_SECRET),
        transport=transport,
    )


async def test_success_logged_at_debug(caplog):
    transport = AsyncMock()
    transport.send.return_value = TIME_ENVELOPE

    with caplog.at_level(logging.DEBUG, logger="kraken_client"):
        result = await make_dispatcher(transport).send(Visibility.PUBLIC, "Time")

    assert result.ok
    messages = [r.getMessage() for r in caplog.records]
    assert "API call: public/Time started" in messages
    assert any(m.startswith("API call: public/Time completed") for m in messages)


async def test_failure_logged_as_warning(caplog):
    transport = AsyncMock()
    transport.send.side_effect = TransportError("Connection failed")

    with caplog.at_level(logging.DEBUG, logger="kraken_client"):
        result = await make_dispatcher(transport).send(Visibility.PRIVATE, "Balance")

    assert not result.ok
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "[transport] Connection failed" in warnings[0].getMessage()


async def test_credentials_are_not_logged(caplog):
    transport = AsyncMock()
    transport.send.return_value = {"error": [], "result": {}}

    with caplog.at_level(logging.DEBUG, logger="kraken_client"):
        await make_dispatcher(transport).send(Visibility.PRIVATE, "Balance")

    assert transport.send.await_count == 1
    assert TEST_KEY not in caplog.text
    assert TEST_SECRET not in caplog.text


async def test_unexpected_exception_logged_and_raised(caplog):
    transport = AsyncMock()
    transport.send.side_effect = RuntimeError("bug")

    with caplog.at_level(logging.DEBUG, logger="kraken_client"):
        with pytest.raises(RuntimeError):
            await make_dispatcher(transport).send(Visibility.PUBLIC, "Time")

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert "raised after" in errors[0].getMessage()
