"""Tests for the exception hierarchy"""

import logging

import pytest

from kraken_client.core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    KrakenClientError,
    RequestTimeoutError,
    ResponseParseError,
    TransportError,
    ValidationError,
    handle_exception,
    wrap_exception,
)


@pytest.mark.parametrize(
    "exc_class, parent",
    [
        (AuthenticationError, ConfigurationError),
        (RequestTimeoutError, TransportError),
        (ResponseParseError, TransportError),
        (ConfigurationError, KrakenClientError),
        (ValidationError, KrakenClientError),
        (APIError, KrakenClientError),
    ],
)
def test_hierarchy(exc_class, parent):
    assert issubclass(exc_class, parent)


def test_message_includes_details():
    exc = TransportError("Connection failed", details={"path": "/0/public/Time"})

    assert str(exc) == "Connection failed (path=/0/public/Time)"
    assert exc.to_dict() == {
        "error_type": "TransportError",
        "message": "Connection failed",
        "details": {"path": "/0/public/Time"},
    }


def test_api_error_keeps_errors():
    exc = APIError("rejected", errors=["EAPI:Invalid nonce"])

    assert exc.errors == ["EAPI:Invalid nonce"]
    assert exc.to_dict()["errors"] == ["EAPI:Invalid nonce"]


def test_wrap_exception():
    original = OSError("connection reset")

    wrapped = wrap_exception(original, TransportError, "Connection failed", path="/0/private/Balance")

    assert isinstance(wrapped, TransportError)
    assert wrapped.original_exception is original
    assert wrapped.details == {"path": "/0/private/Balance"}


def test_wrap_exception_default_message():
    wrapped = wrap_exception(ValueError("bad"), ValidationError)

    assert wrapped.message == "bad"


def test_handle_exception_logs(caplog):
    logger = logging.getLogger("test.exceptions")

    with caplog.at_level(logging.ERROR, logger="test.exceptions"):
        handle_exception(ConfigurationError("missing key"), logger, {"endpoint": "Balance"})
        handle_exception(RuntimeError("boom"), logger)

    messages = [r.getMessage() for r in caplog.records]
    assert "ConfigurationError: missing key" in messages
    assert "Unexpected error: boom" in messages
