"""
Exchange module - Kraken REST access.

Provides:
- Transport protocol and the aiohttp implementation
- Request dispatcher with result normalization
- Endpoint client
- Logging decorator
"""

from kraken_client.services.exchange.transport import Transport, AiohttpTransport
from kraken_client.services.exchange.dispatcher import RequestDispatcher
from kraken_client.services.exchange.client import KrakenClient
from kraken_client.services.exchange.decorators import log_api_call

__all__ = [
    'Transport',
    'AiohttpTransport',
    'RequestDispatcher',
    'KrakenClient',
    'log_api_call',
]
