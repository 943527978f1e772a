"""Shared data models for the arbitrage trading core.

CRITICAL: All monetary values use Decimal. Never use float for prices, volumes, or fees.
"""

import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from pydantic import SecretStr

DEFAULT_TAKER_FEE = Decimal("0.001")  # 0.10%
DEFAULT_MAKER_FEE = Decimal("0.001")

_PAIR_SEPARATORS = ("/", "_", "-")


class OrderSide(str, Enum):
    """Order direction relative to the base currency of a pair."""

    BID = "bid"  # buy base, sell quote
    ASK = "ask"  # sell base, buy quote

    @property
    def opposite(self) -> "OrderSide":
        return OrderSide.ASK if self is OrderSide.BID else OrderSide.BID


@dataclass(frozen=True)
class CurrencyPair:
    """A trading pair, e.g. BTC/USDT (base BTC, quote USDT)."""

    base: str
    quote: str

    @property
    def symbol(self) -> str:
        """Unified ccxt symbol ("BASE/QUOTE")."""
        return f"{self.base}/{self.quote}"

    @classmethod
    def parse(cls, raw: str) -> "CurrencyPair":
        """Parse "BTC/USDT", "btc_usdt" or "BTC-USDT" into a pair.

        Raises:
            ValueError: If ``raw`` does not contain exactly two currencies.
        """
        text = raw.strip().upper()
        for separator in _PAIR_SEPARATORS:
            if separator in text:
                parts = [part.strip() for part in text.split(separator)]
                if len(parts) == 2 and all(parts):
                    return cls(base=parts[0], quote=parts[1])
                break
        raise ValueError(f"Invalid currency pair: {raw!r}")

    def __str__(self) -> str:
        return self.symbol


@dataclass
class OrderbookLevel:
    """One price level of an orderbook side."""

    price: Decimal
    volume: Decimal


@dataclass
class Orderbook:
    """Bid/ask snapshot for a single pair.

    Bids are sorted best (highest) first, asks best (lowest) first.
    """

    pair: CurrencyPair
    bids: list[OrderbookLevel] = field(default_factory=list)
    asks: list[OrderbookLevel] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)

    @property
    def best_bid(self) -> OrderbookLevel | None:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> OrderbookLevel | None:
        return self.asks[0] if self.asks else None


@dataclass
class PairSettings:
    """Venue trading constraints for one pair."""

    pair: CurrencyPair
    amount_step: Decimal = Decimal("0.00000001")
    price_tick: Decimal = Decimal("0.00000001")
    min_volume: Decimal = Decimal("0")


@dataclass
class ExchangeSettings:
    """Venue-wide parameters plus the credentials used for private calls.

    Credentials are SecretStr so they never end up in reprs or log lines.
    """

    api_key: SecretStr = field(default_factory=lambda: SecretStr(""))
    api_secret: SecretStr = field(default_factory=lambda: SecretStr(""))
    taker_fee: Decimal = DEFAULT_TAKER_FEE
    maker_fee: Decimal = DEFAULT_MAKER_FEE
    pairs: dict[str, PairSettings] = field(default_factory=dict)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key.get_secret_value() and self.api_secret.get_secret_value())


@dataclass
class Position:
    """Holding of one currency on one venue."""

    exchange: str
    currency: str
    amount: Decimal


@dataclass
class Portfolio:
    """Account positions reported by a venue."""

    exchange: str
    positions: list[Position] = field(default_factory=list)
    fetched_at: float = field(default_factory=time.time)


@dataclass
class OrderDispatched:
    """Venue acknowledgement of a submitted order."""

    order_id: str
    symbol: str
    side: OrderSide
    price: Decimal
    accepted_volume: Decimal
    status: str = "open"
    timestamp: float = field(default_factory=time.time)
