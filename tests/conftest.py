"""Shared fixtures"""

from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from kraken_client.models.request import RequestOptions
from kraken_client.services.auth.nonce import NonceGenerator
from kraken_client.services.exchange.client import KrakenClient

# Example private key from the exchange's authentication docs
TEST_SECRET = (
    "kQH5HW/8p1uGOVjbgWA7FunAmGO8lsSUXNsu3eow76sz84Q18fWxnyRzBHCd3pd5nE9qa99HAZtuZuj6F1huXg=="
)
TEST_KEY = "test-api-key"

TIME_ENVELOPE = {
    "error": [],
    "result": {"unixtime": 1497805936, "rfc1123": "Sun, 18 Jun 17 17:12:16 +0000"},
}

ASSETS = {
    "XETH": {"aclass": "currency", "altname": "ETH", "decimals": 10, "display_decimals": 5},
    "XXRP": {"aclass": "currency", "altname": "XRP", "decimals": 8, "display_decimals": 5},
    "XXBT": {"aclass": "currency", "altname": "XBT", "decimals": 10, "display_decimals": 5},
    "ZUSD": {"aclass": "currency", "altname": "USD", "decimals": 4, "display_decimals": 2},
}


class FakeTransport:
    """Records every request and replays canned responses"""

    def __init__(self, responses: Optional[List[Union[Dict[str, Any], Exception]]] = None):
        self.responses = list(responses or [])
        self.calls: List[Tuple[RequestOptions, Optional[str]]] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def send(self, options: RequestOptions, body: Optional[str] = None) -> Dict[str, Any]:
        self.calls.append((options, body))
        response = self.responses.pop(0) if self.responses else {"error": [], "result": {}}
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


class StepClock:
    """Microsecond clock that advances by ``step`` on each read"""

    def __init__(self, start: int = 1_616_492_376_594_000, step: int = 0):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def public_client(transport):
    return KrakenClient(transport=transport)


@pytest.fixture
def private_client(transport):
    return KrakenClient(
        api_key=TEST_KEY,
        api_secret=TEST_SECRET,
        transport=transport,
        nonce_generator=NonceGenerator(clock=StepClock(step=1000)),
    )
