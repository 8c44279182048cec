"""
Endpoint parameter models

One pydantic record per endpoint. Field types are strict so that a wrong
shape (a dict where a comma separated list is expected, a string where an
interval is expected) is rejected before any request is built.
``to_params()`` renders the ordered form fields sent to the exchange.
"""

from __future__ import annotations

import re
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from kraken_client.models.request import Scalar

ALL = "all"

OHLC_INTERVALS = (1, 5, 15, 30, 60, 240, 1440, 10080, 21600)

Timestamp = Union[StrictInt, StrictFloat]
# ids returned by the exchange (txid, ledger id) are also accepted for start/end
TimestampOrId = Union[StrictInt, StrictFloat, StrictStr]
Amount = Union[StrictStr, StrictInt, StrictFloat, Decimal]

_WHITESPACE = re.compile(r"\s+")


def strip_whitespace(value: str) -> str:
    """Remove every whitespace character from a delimited list"""
    return _WHITESPACE.sub("", value)


def _render(value) -> Scalar:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        # repr keeps the shortest round-tripping digits, "f" drops the exponent
        return format(Decimal(repr(value)), "f")
    return value


class EndpointParams(BaseModel):
    """Base class for endpoint parameter records"""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def to_params(self) -> Dict[str, Scalar]:
        """Form fields in declaration order, unset fields dropped"""
        rendered: Dict[str, Scalar] = {}
        for name, value in self.model_dump(by_alias=True, exclude_none=True).items():
            rendered[name] = _render(value)
        return rendered


class SymbolListParams(EndpointParams):
    """Shared validation for comma separated symbol lists"""

    @field_validator("*", mode="after")
    @classmethod
    def strip_lists(cls, v, info):
        if info.field_name in ("pair", "asset", "txid", "id") and isinstance(v, str):
            v = strip_whitespace(v)
            if not v:
                raise ValueError(f"{info.field_name} must not be empty")
        return v


# ============================================================================
# Public endpoints
# ============================================================================

class AssetInfoParams(SymbolListParams):
    """Assets: comma separated assets such as ``ETH,XRP``, or ``all``"""

    asset: Optional[StrictStr] = None

    @field_validator("asset", mode="after")
    @classmethod
    def drop_all(cls, v: Optional[str]) -> Optional[str]:
        return None if v == ALL else v


class AssetPairInfo(str, Enum):
    ALL = "all"
    LEVERAGE = "leverage"
    FEES = "fees"
    MARGIN = "margin"


class AssetPairsParams(SymbolListParams):
    """AssetPairs: the exchange rejects an explicit ``all`` so it is omitted"""

    info: Optional[AssetPairInfo] = None
    pair: Optional[StrictStr] = None

    @field_validator("info", mode="before")
    @classmethod
    def strict_info(cls, v):
        if v is not None and not isinstance(v, (str, AssetPairInfo)):
            raise ValueError("info must be a string: all, leverage, fees or margin")
        return v

    @field_validator("info", mode="after")
    @classmethod
    def drop_all_info(cls, v: Optional[AssetPairInfo]) -> Optional[AssetPairInfo]:
        return None if v == AssetPairInfo.ALL else v

    @field_validator("pair", mode="after")
    @classmethod
    def drop_all_pair(cls, v: Optional[str]) -> Optional[str]:
        return None if v == ALL else v


class TickerParams(SymbolListParams):
    pair: Optional[StrictStr] = None

    @field_validator("pair", mode="after")
    @classmethod
    def drop_all(cls, v: Optional[str]) -> Optional[str]:
        return None if v == ALL else v


class OHLCParams(SymbolListParams):
    """OHLC: interval in minutes, one of OHLC_INTERVALS"""

    pair: StrictStr
    interval: Optional[StrictInt] = None
    since: Optional[Timestamp] = None

    @field_validator("interval")
    @classmethod
    def known_interval(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v not in OHLC_INTERVALS:
            raise ValueError(
                "interval must be one of " + ", ".join(str(i) for i in OHLC_INTERVALS)
            )
        return v


class OrderBookParams(SymbolListParams):
    pair: StrictStr
    count: Optional[StrictInt] = Field(default=None, gt=0)


class TradesParams(SymbolListParams):
    pair: StrictStr
    since: Optional[Timestamp] = None


class SpreadParams(SymbolListParams):
    pair: StrictStr
    since: Optional[Timestamp] = None


# ============================================================================
# Private endpoints
# ============================================================================

class CloseTime(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    BOTH = "both"


class TradeType(str, Enum):
    ALL = "all"
    ANY_POSITION = "any position"
    CLOSED_POSITION = "closed position"
    CLOSING_POSITION = "closing position"
    NO_POSITION = "no position"


class LedgerType(str, Enum):
    ALL = "all"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRADE = "trade"
    MARGIN = "margin"


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP_LOSS = "stop-loss"
    TAKE_PROFIT = "take-profit"
    STOP_LOSS_LIMIT = "stop-loss-limit"
    TAKE_PROFIT_LIMIT = "take-profit-limit"
    SETTLE_POSITION = "settle-position"


class TradeBalanceParams(SymbolListParams):
    aclass: Optional[StrictStr] = None
    asset: Optional[StrictStr] = None


class OpenOrdersParams(EndpointParams):
    trades: Optional[StrictBool] = None
    userref: Optional[StrictInt] = None


class ClosedOrdersParams(EndpointParams):
    trades: Optional[StrictBool] = None
    userref: Optional[StrictInt] = None
    start: Optional[TimestampOrId] = None
    end: Optional[TimestampOrId] = None
    ofs: Optional[StrictInt] = Field(default=None, ge=0)
    closetime: Optional[CloseTime] = None


class QueryOrdersParams(SymbolListParams):
    """QueryOrders: up to 20 comma separated transaction ids"""

    txid: StrictStr
    trades: Optional[StrictBool] = None
    userref: Optional[StrictInt] = None

    @field_validator("txid", mode="after")
    @classmethod
    def at_most_twenty(cls, v: str) -> str:
        if len(v.split(",")) > 20:
            raise ValueError("txid accepts at most 20 transaction ids")
        return v


class TradesHistoryParams(EndpointParams):
    type: Optional[TradeType] = None
    trades: Optional[StrictBool] = None
    start: Optional[TimestampOrId] = None
    end: Optional[TimestampOrId] = None
    ofs: Optional[StrictInt] = Field(default=None, ge=0)


class OpenPositionsParams(SymbolListParams):
    txid: Optional[StrictStr] = None
    docalcs: Optional[StrictBool] = None


class LedgersParams(SymbolListParams):
    aclass: Optional[StrictStr] = None
    asset: Optional[StrictStr] = None
    type: Optional[LedgerType] = None
    start: Optional[TimestampOrId] = None
    end: Optional[TimestampOrId] = None
    ofs: Optional[StrictInt] = Field(default=None, ge=0)

    @field_validator("asset", mode="after")
    @classmethod
    def drop_all(cls, v: Optional[str]) -> Optional[str]:
        return None if v == ALL else v


class QueryLedgersParams(SymbolListParams):
    """QueryLedgers: at least one and up to 20 ledger ids"""

    id: StrictStr

    @field_validator("id", mode="after")
    @classmethod
    def at_most_twenty(cls, v: str) -> str:
        if len(v.split(",")) > 20:
            raise ValueError("id accepts at most 20 ledger ids")
        return v


class TradeVolumeParams(SymbolListParams):
    pair: Optional[StrictStr] = None
    fee_info: Optional[StrictBool] = Field(default=None, alias="fee-info")


class AddOrderParams(SymbolListParams):
    """AddOrder: a standard order; ``validate`` only checks it server side"""

    pair: StrictStr
    type: OrderSide
    ordertype: OrderType
    volume: Amount
    price: Optional[Amount] = None
    price2: Optional[Amount] = None
    leverage: Optional[StrictStr] = None
    oflags: Optional[StrictStr] = None
    starttm: Optional[Union[StrictInt, StrictStr]] = None
    expiretm: Optional[Union[StrictInt, StrictStr]] = None
    userref: Optional[StrictInt] = None
    validate_only: Optional[StrictBool] = Field(default=None, alias="validate")

    @field_validator("volume", "price", "price2", mode="after")
    @classmethod
    def positive_amount(cls, v, info):
        if v is None:
            return v
        try:
            amount = Decimal(str(v))
        except ArithmeticError as e:
            raise ValueError(f"{info.field_name} must be numeric") from e
        if not amount.is_finite() or amount <= 0:
            raise ValueError(f"{info.field_name} must be a positive number")
        return v

    @field_validator("oflags", mode="after")
    @classmethod
    def strip_flags(cls, v: Optional[str]) -> Optional[str]:
        return strip_whitespace(v) if v is not None else v
