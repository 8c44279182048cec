"""
Kraken REST client.

Thin endpoint methods: each validates its arguments through a typed
parameter record and hands the rendered fields to the dispatcher. Every
method returns an ApiResult; nothing is sent when validation fails.
"""

from typing import Any, Optional, Type

from pydantic import ValidationError as PydanticValidationError

from kraken_client.core.config import ClientSettings
from kraken_client.core.exceptions import ValidationError
from kraken_client.core.logger import get_logger
from kraken_client.models.params import (
    AddOrderParams,
    AssetInfoParams,
    AssetPairsParams,
    ClosedOrdersParams,
    EndpointParams,
    LedgersParams,
    OHLCParams,
    OpenOrdersParams,
    OpenPositionsParams,
    OrderBookParams,
    QueryLedgersParams,
    QueryOrdersParams,
    SpreadParams,
    TickerParams,
    TradeBalanceParams,
    TradesHistoryParams,
    TradesParams,
    TradeVolumeParams,
)
from kraken_client.models.request import Credentials, Visibility
from kraken_client.models.result import ApiResult, ErrorKind
from kraken_client.services.auth.nonce import NonceGenerator
from kraken_client.services.exchange.dispatcher import DEFAULT_TIMEOUT, RequestDispatcher
from kraken_client.services.exchange.transport import AiohttpTransport, Transport

logger = get_logger(__name__)


def _validation_failure(endpoint: str, exc: PydanticValidationError) -> ApiResult:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "params"
        problems.append(f"{loc}: {err.get('msg')}")
    error = ValidationError(
        f"Invalid parameters for {endpoint}: " + "; ".join(problems),
        details={"endpoint": endpoint, "fields": problems},
        original_exception=exc,
    )
    return ApiResult.from_exception(ErrorKind.VALIDATION, error)


class KrakenClient:
    """
    Kraken API client.

    Without API key and secret only the public endpoints are usable;
    private calls then resolve to a configuration error.

    Usage:
        async with KrakenClient() as kraken:
            result = await kraken.get_time()
            print(result.unwrap()["unixtime"])
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        api_base: str = "api.kraken.com",
        api_protocol: str = "https",
        api_version: int = 0,
        api_otp: Optional[str] = None,
        *,
        api_port: int = 443,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[Transport] = None,
        nonce_generator: Optional[NonceGenerator] = None,
        user_agent: Optional[str] = None,
    ):
        self.credentials = Credentials(
            api_key=api_key or None,
            api_secret=api_secret or None,
            otp=api_otp or None,
            host=api_base,
            protocol=api_protocol,
            version=api_version,
            port=api_port,
        )
        extra = {"user_agent": user_agent} if user_agent else {}
        self.dispatcher = RequestDispatcher(
            credentials=self.credentials,
            transport=transport or AiohttpTransport(),
            nonce_generator=nonce_generator,
            timeout=timeout,
            **extra,
        )

        logger.debug(f"KrakenClient initialized: {self.credentials}")

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        transport: Optional[Transport] = None,
    ) -> "KrakenClient":
        """Build a client from loaded configuration"""
        return cls(
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            api_base=settings.api_base,
            api_protocol=settings.api_protocol,
            api_version=settings.api_version,
            api_otp=settings.api_otp,
            api_port=settings.api_port,
            timeout=settings.timeout,
            transport=transport,
            user_agent=settings.user_agent,
        )

    async def close(self) -> None:
        await self.dispatcher.close()

    async def __aenter__(self) -> "KrakenClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _call(
        self,
        visibility: Visibility,
        endpoint: str,
        params_model: Optional[Type[EndpointParams]] = None,
        **kwargs: Any,
    ) -> ApiResult:
        params = {}
        if params_model is not None:
            # drop unset arguments so model defaults apply
            supplied = {k: v for k, v in kwargs.items() if v is not None}
            try:
                params = params_model(**supplied).to_params()
            except PydanticValidationError as e:
                return _validation_failure(endpoint, e)

        return await self.dispatcher.send(visibility, endpoint, params)

    # ------------------------------------------------------------------
    # Public market data
    # ------------------------------------------------------------------

    async def get_time(self) -> ApiResult:
        """
        Server time, to help estimate clock skew.

        Result: ``{"unixtime": 1497805936, "rfc1123": "Sun, 18 Jun 17 17:12:16 +0000"}``
        """
        return await self._call(Visibility.PUBLIC, "Time")

    async def get_asset_info(self, assets: Optional[str] = None) -> ApiResult:
        """
        Asset information.

        Args:
            assets: comma separated assets such as ``"ETH,XRP"``; ``"all"``
                or None for every asset
        """
        return await self._call(Visibility.PUBLIC, "Assets", AssetInfoParams, asset=assets)

    async def get_tradable_asset_pairs(
        self,
        info: Optional[str] = None,
        pair: Optional[str] = None,
    ) -> ApiResult:
        """
        Tradable asset pairs.

        Args:
            info: all, leverage, fees or margin
            pair: comma separated pairs such as ``"ETHUSD,XRPUSD"``, or ``"all"``
        """
        return await self._call(
            Visibility.PUBLIC, "AssetPairs", AssetPairsParams, info=info, pair=pair
        )

    async def get_ticker_information(self, pair: Optional[str] = None) -> ApiResult:
        return await self._call(Visibility.PUBLIC, "Ticker", TickerParams, pair=pair)

    async def get_ohlc(
        self,
        pair: str,
        interval: Optional[int] = None,
        since: Optional[float] = None,
    ) -> ApiResult:
        """
        OHLC candles.

        Args:
            pair: asset pair
            interval: minutes, one of 1, 5, 15, 30, 60, 240, 1440, 10080, 21600
            since: return committed candles since this id
        """
        return await self._call(
            Visibility.PUBLIC, "OHLC", OHLCParams, pair=pair, interval=interval, since=since
        )

    async def get_order_book(self, pair: str, count: Optional[int] = None) -> ApiResult:
        """Market depth: asks and bids as [price, volume, timestamp] entries"""
        return await self._call(
            Visibility.PUBLIC, "Depth", OrderBookParams, pair=pair, count=count
        )

    async def get_trades(self, pair: str, since: Optional[float] = None) -> ApiResult:
        """Recent trades; ``result["last"]`` is the id to poll with next"""
        return await self._call(Visibility.PUBLIC, "Trades", TradesParams, pair=pair, since=since)

    async def get_spread(self, pair: str, since: Optional[float] = None) -> ApiResult:
        return await self._call(Visibility.PUBLIC, "Spread", SpreadParams, pair=pair, since=since)

    # ------------------------------------------------------------------
    # Private user data
    # ------------------------------------------------------------------

    async def get_balance(self) -> ApiResult:
        """Balances keyed by asset, e.g. ``{"ZUSD": "0.0000"}``"""
        return await self._call(Visibility.PRIVATE, "Balance")

    async def get_trade_balance(
        self,
        aclass: Optional[str] = None,
        asset: Optional[str] = None,
    ) -> ApiResult:
        """
        Trade balance.

        Args:
            aclass: asset class, exchange default ``currency``
            asset: base asset used to determine balance, exchange default ``ZUSD``
        """
        return await self._call(
            Visibility.PRIVATE, "TradeBalance", TradeBalanceParams, aclass=aclass, asset=asset
        )

    async def get_open_orders(
        self,
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
    ) -> ApiResult:
        return await self._call(
            Visibility.PRIVATE, "OpenOrders", OpenOrdersParams, trades=trades, userref=userref
        )

    async def get_closed_orders(
        self,
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
        start: Optional[Any] = None,
        end: Optional[Any] = None,
        ofs: Optional[int] = None,
        closetime: Optional[str] = None,
    ) -> ApiResult:
        """
        Closed orders.

        Args:
            trades: include trades
            userref: restrict to this user reference id
            start: exclusive starting unix timestamp or order txid
            end: inclusive ending unix timestamp or order txid
            ofs: result offset
            closetime: open, close or both
        """
        return await self._call(
            Visibility.PRIVATE,
            "ClosedOrders",
            ClosedOrdersParams,
            trades=trades,
            userref=userref,
            start=start,
            end=end,
            ofs=ofs,
            closetime=closetime,
        )

    async def get_query_orders(
        self,
        txid: str,
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
    ) -> ApiResult:
        return await self._call(
            Visibility.PRIVATE,
            "QueryOrders",
            QueryOrdersParams,
            txid=txid,
            trades=trades,
            userref=userref,
        )

    async def get_trades_history(
        self,
        type: Optional[str] = None,
        trades: Optional[bool] = None,
        start: Optional[Any] = None,
        end: Optional[Any] = None,
        ofs: Optional[int] = None,
    ) -> ApiResult:
        """
        Trade history.

        Args:
            type: all, any position, closed position, closing position or no position
        """
        return await self._call(
            Visibility.PRIVATE,
            "TradesHistory",
            TradesHistoryParams,
            type=type,
            trades=trades,
            start=start,
            end=end,
            ofs=ofs,
        )

    async def get_open_positions(
        self,
        txid: Optional[str] = None,
        docalcs: Optional[bool] = None,
    ) -> ApiResult:
        return await self._call(
            Visibility.PRIVATE, "OpenPositions", OpenPositionsParams, txid=txid, docalcs=docalcs
        )

    async def get_ledgers(
        self,
        aclass: Optional[str] = None,
        asset: Optional[str] = None,
        type: Optional[str] = None,
        start: Optional[Any] = None,
        end: Optional[Any] = None,
        ofs: Optional[int] = None,
    ) -> ApiResult:
        """
        Ledger entries.

        Args:
            type: all, deposit, withdrawal, trade or margin
        """
        return await self._call(
            Visibility.PRIVATE,
            "Ledgers",
            LedgersParams,
            aclass=aclass,
            asset=asset,
            type=type,
            start=start,
            end=end,
            ofs=ofs,
        )

    async def get_query_ledgers(self, id: str) -> ApiResult:
        """Ledger entries by comma separated ids (20 maximum)"""
        return await self._call(Visibility.PRIVATE, "QueryLedgers", QueryLedgersParams, id=id)

    async def get_trade_volume(
        self,
        pair: Optional[str] = None,
        fee_info: Optional[bool] = None,
    ) -> ApiResult:
        return await self._call(
            Visibility.PRIVATE, "TradeVolume", TradeVolumeParams, pair=pair, fee_info=fee_info
        )

    # ------------------------------------------------------------------
    # Private trading
    # ------------------------------------------------------------------

    async def add_order(
        self,
        pair: str,
        type: str,
        ordertype: str,
        volume: Any,
        price: Optional[Any] = None,
        price2: Optional[Any] = None,
        leverage: Optional[str] = None,
        oflags: Optional[str] = None,
        starttm: Optional[Any] = None,
        expiretm: Optional[Any] = None,
        userref: Optional[int] = None,
        validate_only: Optional[bool] = None,
    ) -> ApiResult:
        """
        Place a standard order.

        Args:
            pair: asset pair
            type: buy or sell
            ordertype: market, limit, stop-loss, take-profit,
                stop-loss-limit, take-profit-limit or settle-position
            volume: order volume in lots
            price: limit or trigger price, depending on ordertype
            price2: secondary price, depending on ordertype
            validate_only: let the exchange validate without placing
        """
        return await self._call(
            Visibility.PRIVATE,
            "AddOrder",
            AddOrderParams,
            pair=pair,
            type=type,
            ordertype=ordertype,
            volume=volume,
            price=price,
            price2=price2,
            leverage=leverage,
            oflags=oflags,
            starttm=starttm,
            expiretm=expiretm,
            userref=userref,
            validate_only=validate_only,
        )
