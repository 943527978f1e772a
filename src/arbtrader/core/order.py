"""Order value model.

An Order is one intended trade on one side of a currency pair. Given a price
and a volume it derives the counter-volume, the taker fee and the exact
amounts leaving (in) and entering (out) the account:

    Side | base_volume_in | quote_volume_in | base_volume_out        | quote_volume_out
    Bid  | 0              | trunc8(quote)   | trunc8(base - fee)     | 0
    Ask  | trunc8(base)   | 0               | 0                      | trunc8(quote - quote*fee)

"In" is what the account spends, "out" is what it receives net of the taker
fee. Derived volumes are truncated, never rounded up, so a receivable is
never overstated.

Orders are independently owned values: a matching counter-order is a copy,
never a shared reference.
"""

import copy
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from arbtrader.core.precision import to_decimal, trunc8
from arbtrader.exceptions import InvalidOrderError, InvalidOrderSideError
from arbtrader.models import DEFAULT_TAKER_FEE, CurrencyPair, OrderSide

_ZERO = Decimal("0")


def _finite(value: Decimal | float | int | str, field_name: str) -> Decimal:
    try:
        value = to_decimal(value)
    except InvalidOperation:
        raise InvalidOrderError(f"order: {field_name} {value!r} is not a number") from None
    if not value.is_finite():
        raise InvalidOrderError(f"order: {field_name} must be finite, got {value}")
    return value


@dataclass
class Order:
    """A fully resolved order.

    Build orders with ``Order.new_bid`` / ``Order.new_ask`` and change their
    size only through ``set_base_volume`` / ``set_quote_volume``; every other
    field is derived.
    """

    side: OrderSide
    price: Decimal
    base_volume: Decimal = _ZERO
    inverse_price: Decimal = _ZERO  # base per quote
    quote_volume: Decimal = _ZERO
    taker_fee: Decimal = DEFAULT_TAKER_FEE
    fee: Decimal = _ZERO
    base_volume_in: Decimal = _ZERO
    base_volume_out: Decimal = _ZERO
    quote_volume_in: Decimal = _ZERO
    quote_volume_out: Decimal = _ZERO
    hit: Any | None = None  # orderbook event that triggered the order
    progress: Decimal = _ZERO
    pair: CurrencyPair | None = None

    def __post_init__(self) -> None:
        self.side = self._checked_side()
        self.taker_fee = _finite(self.taker_fee, "taker fee")
        self.progress = _finite(self.progress, "progress")
        self._set_price(self.price)
        self.set_base_volume(self.base_volume)

    @classmethod
    def new_bid(
        cls,
        price: Decimal | float | int | str,
        base_volume: Decimal | float | int | str,
        *,
        pair: CurrencyPair | None = None,
        hit: Any | None = None,
    ) -> "Order":
        """Build a Bid: spend quote currency, receive base currency.

        Raises:
            InvalidOrderError: If price <= 0, base_volume < 0, or either is not finite.
        """
        return cls(side=OrderSide.BID, price=price, base_volume=base_volume, pair=pair, hit=hit)

    @classmethod
    def new_ask(
        cls,
        price: Decimal | float | int | str,
        base_volume: Decimal | float | int | str,
        *,
        pair: CurrencyPair | None = None,
        hit: Any | None = None,
    ) -> "Order":
        """Build an Ask: spend base currency, receive quote currency.

        Raises:
            InvalidOrderError: If price <= 0, base_volume < 0, or either is not finite.
        """
        return cls(side=OrderSide.ASK, price=price, base_volume=base_volume, pair=pair, hit=hit)

    def set_base_volume(self, base_volume: Decimal | float | int | str) -> None:
        """Set the base volume and cascade to quote volume, fee and in/out volumes.

        Raises:
            InvalidOrderError: If base_volume is negative or not finite.
        """
        base_volume = _finite(base_volume, "base volume")
        if base_volume < 0:
            raise InvalidOrderError(f"order: negative base volume {base_volume}")
        self.base_volume = base_volume
        self.quote_volume = self.price * base_volume
        self.fee = base_volume * self.taker_fee
        self._update_volumes_in_out()

    def set_quote_volume(self, quote_volume: Decimal | float | int | str) -> None:
        """Set the quote volume and cascade to base volume, fee and in/out volumes.

        Raises:
            InvalidOrderError: If quote_volume is negative or not finite, or the price is zero.
        """
        quote_volume = _finite(quote_volume, "quote volume")
        if quote_volume < 0:
            raise InvalidOrderError(f"order: negative quote volume {quote_volume}")
        if self.price == 0:
            raise InvalidOrderError("order: cannot derive base volume at zero price")
        self.quote_volume = quote_volume
        self.base_volume = quote_volume / self.price
        self.fee = self.base_volume * self.taker_fee
        self._update_volumes_in_out()

    def set_progress(self, progress: Decimal | float | int | str) -> None:
        """Record the filled fraction of the order (0 = untouched, 1 = filled)."""
        progress = _finite(progress, "progress")
        if not 0 <= progress <= 1:
            raise InvalidOrderError(f"order: progress {progress} outside [0, 1]")
        self.progress = progress

    def matching_counter_order(self) -> "Order":
        """Return the order that crosses the spread against this one.

        Same price and volumes, opposite side, in/out volumes re-derived for
        the new side. Used to evaluate executing the opposite leg at the
        observed price; it does not place anything.

        Raises:
            InvalidOrderSideError: If this order's side is not a valid OrderSide.
        """
        side = self._checked_side()
        counter = copy.copy(self)
        counter.side = side.opposite
        counter._update_volumes_in_out()
        return counter

    def matching_ask(self) -> "Order":
        """Return the Ask matching this Bid."""
        if self._checked_side() is not OrderSide.BID:
            raise InvalidOrderSideError("order: not a bid")
        return self.matching_counter_order()

    def matching_bid(self) -> "Order":
        """Return the Bid matching this Ask."""
        if self._checked_side() is not OrderSide.ASK:
            raise InvalidOrderSideError("order: not an ask")
        return self.matching_counter_order()

    def _set_price(self, price: Decimal | float | int | str) -> None:
        price = _finite(price, "price")
        if price <= 0:
            raise InvalidOrderError(f"order: price must be positive, got {price}")
        self.price = price
        self.inverse_price = Decimal(1) / price

    def _checked_side(self) -> OrderSide:
        try:
            return OrderSide(self.side)
        except ValueError:
            raise InvalidOrderSideError(f"order: invalid side {self.side!r}") from None

    def _update_volumes_in_out(self) -> None:
        side = self._checked_side()
        if side is OrderSide.BID:
            self.base_volume_in = _ZERO
            self.quote_volume_in = trunc8(self.quote_volume)
            self.base_volume_out = trunc8(self.base_volume - self.base_volume * self.taker_fee)
            self.quote_volume_out = _ZERO
        else:
            self.base_volume_in = trunc8(self.base_volume)
            self.quote_volume_in = _ZERO
            self.base_volume_out = _ZERO
            self.quote_volume_out = trunc8(self.quote_volume - self.quote_volume * self.taker_fee)
