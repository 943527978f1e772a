"""Venue provider backed by ccxt async.

Wraps a ``ccxt.async_support`` exchange and exposes the four trading
capabilities as closures over that client. Venue subclasses only pick the
ccxt exchange id and adjust the client config.
"""

import time
from decimal import Decimal

import ccxt.async_support as ccxt_async

from arbtrader.config import VenueSettings
from arbtrader.core.order import Order
from arbtrader.core.precision import to_decimal, trunc8
from arbtrader.exceptions import InvalidOrderError, InvalidOrderSideError
from arbtrader.exchange.provider import (
    CloseFunc,
    ExchangeProvider,
    OrderbookFunc,
    PortfolioFunc,
    PostOrderFunc,
    SettingsFunc,
)
from arbtrader.logging import get_logger
from arbtrader.models import (
    DEFAULT_MAKER_FEE,
    DEFAULT_TAKER_FEE,
    CurrencyPair,
    ExchangeSettings,
    OrderDispatched,
    Orderbook,
    OrderbookLevel,
    OrderSide,
    PairSettings,
    Portfolio,
    Position,
)

logger = get_logger(__name__)

_CCXT_SIDES = {OrderSide.BID: "buy", OrderSide.ASK: "sell"}


def _decimal_or(value: object, default: Decimal) -> Decimal:
    """Convert a ccxt numeric field, falling back to ``default`` when missing."""
    if value is None:
        return default
    return Decimal(str(value))


def _parse_levels(raw_levels: list) -> list[OrderbookLevel]:
    # ccxt levels are [price, amount] or [price, amount, count]
    return [
        OrderbookLevel(price=Decimal(str(level[0])), volume=Decimal(str(level[1])))
        for level in raw_levels
    ]


class CcxtProvider(ExchangeProvider):
    """Provider for any spot venue supported by ccxt.

    Args:
        venue: Venue connection settings (depth, demo flag). Credentials are
            not read from here; they arrive with each private call.
    """

    exchange_id: str = ""
    venue_name: str = ""

    def __init__(self, venue: VenueSettings | None = None) -> None:
        if not self.exchange_id:
            raise TypeError(f"{type(self).__name__} does not define a ccxt exchange_id")
        self._venue = venue or VenueSettings()
        exchange_class = getattr(ccxt_async, self.exchange_id)
        self._exchange = exchange_class(self._build_config())

    def _build_config(self) -> dict:
        """Return the ccxt constructor config. Subclasses extend this."""
        return {
            "enableRateLimit": True,
            "options": {
                "defaultType": "spot",
            },
        }

    @property
    def exchange(self) -> ccxt_async.Exchange:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    @property
    def name(self) -> str:
        return self.venue_name or self.exchange_id

    def bind_settings(self) -> SettingsFunc:
        async def fetch_settings() -> ExchangeSettings:
            markets = await self._exchange.load_markets()
            settings = self._parse_settings(markets)
            logger.info(
                "venue_markets_loaded",
                exchange=self.name,
                market_count=len(markets),
                spot_pairs=len(settings.pairs),
            )
            return settings

        return fetch_settings

    def bind_orderbook(self) -> OrderbookFunc:
        depth = self._venue.orderbook_depth

        async def fetch_orderbook(pair: CurrencyPair) -> Orderbook:
            raw = await self._exchange.fetch_order_book(pair.symbol, limit=depth)
            timestamp = raw.get("timestamp")
            return Orderbook(
                pair=pair,
                bids=_parse_levels(raw.get("bids") or []),
                asks=_parse_levels(raw.get("asks") or []),
                timestamp=float(timestamp) / 1000.0 if timestamp else time.time(),
            )

        return fetch_orderbook

    def bind_portfolio(self) -> PortfolioFunc:
        async def fetch_portfolio(settings: ExchangeSettings) -> Portfolio:
            self._authenticate(settings)
            balance = await self._exchange.fetch_balance()
            totals = balance.get("total") or {}
            positions = [
                Position(exchange=self.name, currency=currency, amount=Decimal(str(amount)))
                for currency, amount in totals.items()
                if amount
            ]
            logger.debug("venue_balance_fetched", exchange=self.name, positions=len(positions))
            return Portfolio(exchange=self.name, positions=positions)

        return fetch_portfolio

    def bind_post_order(self) -> PostOrderFunc:
        async def post_order(order: Order, settings: ExchangeSettings) -> OrderDispatched:
            if order.pair is None:
                raise InvalidOrderError(f"{self.name}: order has no pair")
            side = _CCXT_SIDES.get(order.side)
            if side is None:
                raise InvalidOrderSideError(f"{self.name}: invalid side {order.side!r}")
            self._authenticate(settings)

            amount = trunc8(order.base_volume)
            logger.info(
                "posting_order",
                exchange=self.name,
                symbol=order.pair.symbol,
                side=side,
                price=str(order.price),
                amount=str(amount),
            )
            result = await self._exchange.create_order(
                order.pair.symbol, "limit", side, float(amount), float(order.price)
            )
            return self._parse_dispatch(order, result, amount)

        return post_order

    def bind_close(self) -> CloseFunc:
        async def close() -> None:
            logger.info("closing_venue_connection", exchange=self.name)
            await self._exchange.close()

        return close

    def _authenticate(self, settings: ExchangeSettings) -> None:
        self._exchange.apiKey = settings.api_key.get_secret_value()
        self._exchange.secret = settings.api_secret.get_secret_value()

    def _parse_settings(self, markets: dict) -> ExchangeSettings:
        trading_fees = (self._exchange.fees or {}).get("trading") or {}
        pairs: dict[str, PairSettings] = {}
        for symbol, market in markets.items():
            if not market.get("spot") or market.get("active") is False:
                continue
            limits = market.get("limits") or {}
            precision = market.get("precision") or {}
            amount_limits = limits.get("amount") or {}
            pairs[symbol] = PairSettings(
                pair=CurrencyPair(base=market["base"], quote=market["quote"]),
                amount_step=_decimal_or(precision.get("amount"), Decimal("0.00000001")),
                price_tick=_decimal_or(precision.get("price"), Decimal("0.00000001")),
                min_volume=_decimal_or(amount_limits.get("min"), Decimal("0")),
            )
        return ExchangeSettings(
            taker_fee=_decimal_or(trading_fees.get("taker"), DEFAULT_TAKER_FEE),
            maker_fee=_decimal_or(trading_fees.get("maker"), DEFAULT_MAKER_FEE),
            pairs=pairs,
        )

    def _parse_dispatch(self, order: Order, result: dict, amount: Decimal) -> OrderDispatched:
        # All values through Decimal(str()) to avoid float noise
        timestamp = result.get("timestamp")
        return OrderDispatched(
            order_id=str(result.get("id", "")),
            symbol=result.get("symbol") or order.pair.symbol,
            side=OrderSide(order.side),
            price=_decimal_or(result.get("price"), order.price),
            accepted_volume=_decimal_or(result.get("amount"), to_decimal(amount)),
            status=result.get("status") or "open",
            timestamp=float(timestamp) / 1000.0 if timestamp else time.time(),
        )
