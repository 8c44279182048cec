"""
Data models

Request context, call results and per-endpoint parameter records.
"""

from .request import (
    Credentials,
    HttpMethod,
    RequestContext,
    RequestOptions,
    Visibility,
)

from .result import (
    ApiResult,
    ErrorKind,
)

from .params import (
    OHLC_INTERVALS,
    AddOrderParams,
    AssetInfoParams,
    AssetPairInfo,
    AssetPairsParams,
    CloseTime,
    ClosedOrdersParams,
    EndpointParams,
    LedgerType,
    LedgersParams,
    OHLCParams,
    OpenOrdersParams,
    OpenPositionsParams,
    OrderBookParams,
    OrderSide,
    OrderType,
    QueryLedgersParams,
    QueryOrdersParams,
    SpreadParams,
    TickerParams,
    TradeBalanceParams,
    TradeType,
    TradesHistoryParams,
    TradesParams,
    TradeVolumeParams,
)

__all__ = [
    # Request
    "Credentials",
    "HttpMethod",
    "RequestContext",
    "RequestOptions",
    "Visibility",

    # Result
    "ApiResult",
    "ErrorKind",

    # Parameters
    "OHLC_INTERVALS",
    "AddOrderParams",
    "AssetInfoParams",
    "AssetPairInfo",
    "AssetPairsParams",
    "CloseTime",
    "ClosedOrdersParams",
    "EndpointParams",
    "LedgerType",
    "LedgersParams",
    "OHLCParams",
    "OpenOrdersParams",
    "OpenPositionsParams",
    "OrderBookParams",
    "OrderSide",
    "OrderType",
    "QueryLedgersParams",
    "QueryOrdersParams",
    "SpreadParams",
    "TickerParams",
    "TradeBalanceParams",
    "TradeType",
    "TradesHistoryParams",
    "TradesParams",
    "TradeVolumeParams",
]
