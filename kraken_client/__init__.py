"""
Asyncio client for the Kraken REST API.

Usage:
    from kraken_client import KrakenClient

    async with KrakenClient() as kraken:
        result = await kraken.get_asset_info("ETH,XRP")
        if result.ok:
            print(result.result)
        else:
            print(result.kind, result.message)
"""

from kraken_client.core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    KrakenClientError,
    RequestTimeoutError,
    ResponseParseError,
    TransportError,
    ValidationError,
)
from kraken_client.models.request import Credentials, Visibility
from kraken_client.models.result import ApiResult, ErrorKind
from kraken_client.services.auth import NonceGenerator, sign_request
from kraken_client.services.exchange import AiohttpTransport, KrakenClient, RequestDispatcher

__version__ = "0.3.0"

__all__ = [
    'KrakenClient',
    'RequestDispatcher',
    'AiohttpTransport',
    'NonceGenerator',
    'sign_request',
    'Credentials',
    'Visibility',
    'ApiResult',
    'ErrorKind',
    'KrakenClientError',
    'ConfigurationError',
    'AuthenticationError',
    'ValidationError',
    'TransportError',
    'RequestTimeoutError',
    'ResponseParseError',
    'APIError',
]
