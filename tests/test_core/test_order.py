"""Tests for the Order value model.

Verifies:
- Derived fields (quote volume, inverse price, fee) after construction
- In/out volume table for Bid and Ask, truncated to 8 digits
- Volume updates from either side of the pair
- Matching counter-orders (copy, opposite side, re-derived volumes)
- Contract violations raise instead of clamping
"""

from decimal import Decimal

import pytest

from arbtrader.core.order import Order
from arbtrader.core.precision import trunc8
from arbtrader.exceptions import InvalidOrderError, InvalidOrderSideError
from arbtrader.models import CurrencyPair, OrderSide

PRICES_AND_VOLUMES = [
    (Decimal("100"), Decimal("2")),
    (Decimal("50"), Decimal("10")),
    (Decimal("3"), Decimal("0.1")),
    (Decimal("0.00002345"), Decimal("12345.678")),
    (Decimal("37251.17"), Decimal("0.00431")),
    (Decimal("1"), Decimal("0")),
]


class TestNewBid:
    """Tests for Bid construction."""

    def test_example_values(self) -> None:
        order = Order.new_bid(price=100, base_volume=2)
        assert order.side is OrderSide.BID
        assert order.quote_volume == Decimal("200")
        assert order.fee == Decimal("0.002")
        assert order.quote_volume_in == Decimal("200")
        assert order.base_volume_out == Decimal("1.998")
        assert order.base_volume_in == Decimal("0")
        assert order.quote_volume_out == Decimal("0")

    def test_taker_fee_fixed(self) -> None:
        assert Order.new_bid(100, 1).taker_fee == Decimal("0.001")

    def test_inverse_price(self) -> None:
        order = Order.new_bid(price=Decimal("3"), base_volume=1)
        assert order.inverse_price == Decimal(1) / Decimal(3)

    @pytest.mark.parametrize(("price", "base_volume"), PRICES_AND_VOLUMES)
    def test_bid_volume_table(self, price: Decimal, base_volume: Decimal) -> None:
        order = Order.new_bid(price, base_volume)
        assert order.quote_volume == price * base_volume
        assert order.inverse_price == Decimal(1) / price
        assert order.base_volume_in == 0
        assert order.quote_volume_out == 0
        assert order.quote_volume_in == trunc8(order.quote_volume)
        assert order.base_volume_out == trunc8(base_volume * (1 - order.taker_fee))

    def test_nonzero_bid_spends_quote_and_receives_base(self) -> None:
        order = Order.new_bid(Decimal("37251.17"), Decimal("0.00431"))
        assert order.quote_volume_in > 0
        assert order.base_volume_out > 0

    def test_out_volume_truncated_not_rounded(self) -> None:
        # 1.000000019 * 0.999 = 0.999000018981 -> rounding would give ...02
        order = Order.new_bid(1, Decimal("1.000000019"))
        assert order.base_volume_out == Decimal("0.99900001")

    def test_float_inputs_converted_exactly(self) -> None:
        order = Order.new_bid(0.1, 3)
        assert order.price == Decimal("0.1")
        assert order.quote_volume == Decimal("0.3")

    def test_pair_and_hit_carried(self) -> None:
        hit = object()
        pair = CurrencyPair("BTC", "USDT")
        order = Order.new_bid(100, 1, pair=pair, hit=hit)
        assert order.pair == pair
        assert order.hit is hit
        assert order.progress == 0


class TestNewAsk:
    """Tests for Ask construction."""

    def test_example_values(self) -> None:
        order = Order.new_ask(price=50, base_volume=10)
        assert order.side is OrderSide.ASK
        assert order.quote_volume == Decimal("500")
        assert order.fee == Decimal("0.01")
        assert order.base_volume_in == Decimal("10")
        assert order.quote_volume_out == Decimal("499.5")
        assert order.base_volume_out == Decimal("0")
        assert order.quote_volume_in == Decimal("0")

    @pytest.mark.parametrize(("price", "base_volume"), PRICES_AND_VOLUMES)
    def test_ask_volume_table(self, price: Decimal, base_volume: Decimal) -> None:
        order = Order.new_ask(price, base_volume)
        assert order.quote_volume == price * base_volume
        assert order.base_volume_out == 0
        assert order.quote_volume_in == 0
        assert order.base_volume_in == trunc8(base_volume)
        assert order.quote_volume_out == trunc8(order.quote_volume * (1 - order.taker_fee))


class TestInvalidConstruction:
    """Contract violations are rejected, not clamped."""

    @pytest.mark.parametrize("price", [0, -1, Decimal("-0.0001")])
    def test_non_positive_price_rejected(self, price: Decimal) -> None:
        with pytest.raises(InvalidOrderError, match="price"):
            Order.new_bid(price, 1)
        with pytest.raises(InvalidOrderError, match="price"):
            Order.new_ask(price, 1)

    def test_negative_volume_rejected(self) -> None:
        with pytest.raises(InvalidOrderError, match="negative base volume"):
            Order.new_ask(100, -1)

    def test_undefined_side_rejected(self) -> None:
        with pytest.raises(InvalidOrderSideError):
            Order(side="sideways", price=Decimal("1"))  # type: ignore[arg-type]

    def test_side_string_coerced(self) -> None:
        order = Order(side="ask", price=Decimal("2"), base_volume=Decimal("1"))  # type: ignore[arg-type]
        assert order.side is OrderSide.ASK
        assert order.base_volume_in == Decimal("1")


class TestVolumeUpdates:
    """Tests for set_base_volume / set_quote_volume cascades."""

    def test_set_base_volume_recomputes_everything(self) -> None:
        order = Order.new_bid(100, 2)
        order.set_base_volume(Decimal("0.5"))
        assert order.quote_volume == Decimal("50")
        assert order.fee == Decimal("0.0005")
        assert order.quote_volume_in == Decimal("50")
        assert order.base_volume_out == Decimal("0.4995")

    def test_set_quote_volume_recomputes_everything(self) -> None:
        order = Order.new_ask(50, 10)
        order.set_quote_volume(Decimal("100"))
        assert order.base_volume == Decimal("2")
        assert order.fee == Decimal("0.002")
        assert order.base_volume_in == Decimal("2")
        assert order.quote_volume_out == Decimal("99.9")

    def test_negative_base_volume_rejected(self) -> None:
        order = Order.new_bid(100, 2)
        with pytest.raises(InvalidOrderError):
            order.set_base_volume(-1)
        assert order.base_volume == Decimal("2")

    def test_negative_quote_volume_rejected(self) -> None:
        order = Order.new_bid(100, 2)
        with pytest.raises(InvalidOrderError):
            order.set_quote_volume(Decimal("-0.01"))
        assert order.quote_volume == Decimal("200")

    def test_quote_volume_at_zero_price_rejected(self) -> None:
        order = Order.new_bid(100, 2)
        order.price = Decimal("0")
        with pytest.raises(InvalidOrderError, match="zero price"):
            order.set_quote_volume(10)

    @pytest.mark.parametrize(("price", "base_volume"), PRICES_AND_VOLUMES)
    def test_round_trip_through_quote_volume(
        self, price: Decimal, base_volume: Decimal
    ) -> None:
        order = Order.new_ask(price, base_volume)
        quote_volume = order.quote_volume
        order.set_base_volume(Decimal("7"))
        order.set_quote_volume(quote_volume)
        assert trunc8(order.base_volume) == trunc8(base_volume)

    def test_invariant_holds_after_base_update(self) -> None:
        order = Order.new_bid(Decimal("123.45"), 1)
        order.set_base_volume(Decimal("0.333"))
        assert order.quote_volume == order.price * order.base_volume


class TestProgress:
    """Tests for fill progress tracking."""

    def test_set_progress(self) -> None:
        order = Order.new_bid(100, 2)
        order.set_progress(Decimal("0.25"))
        assert order.progress == Decimal("0.25")

    @pytest.mark.parametrize("progress", [Decimal("-0.1"), Decimal("1.01")])
    def test_out_of_range_rejected(self, progress: Decimal) -> None:
        order = Order.new_bid(100, 2)
        with pytest.raises(InvalidOrderError, match="progress"):
            order.set_progress(progress)


class TestMatchingCounterOrder:
    """Tests for crossing-the-spread counter-orders."""

    def test_bid_yields_ask(self) -> None:
        bid = Order.new_bid(100, 2)
        ask = bid.matching_counter_order()
        assert ask.side is OrderSide.ASK
        assert ask.price == bid.price
        assert ask.base_volume == bid.base_volume
        assert ask.quote_volume == bid.quote_volume

    def test_in_out_rederived_for_new_side(self) -> None:
        ask = Order.new_bid(100, 2).matching_counter_order()
        assert ask.base_volume_in == Decimal("2")
        assert ask.quote_volume_in == Decimal("0")
        assert ask.base_volume_out == Decimal("0")
        assert ask.quote_volume_out == Decimal("199.8")

    def test_ask_yields_bid(self) -> None:
        ask = Order.new_ask(50, 10)
        bid = ask.matching_counter_order()
        assert bid.side is OrderSide.BID
        assert bid.price == ask.price
        assert bid.base_volume == ask.base_volume
        assert bid.quote_volume_in == Decimal("500")
        assert bid.base_volume_out == Decimal("9.99")

    def test_counter_is_independent_copy(self) -> None:
        bid = Order.new_bid(100, 2)
        ask = bid.matching_counter_order()
        ask.set_base_volume(5)
        assert bid.base_volume == Decimal("2")
        assert bid.side is OrderSide.BID
        assert bid.quote_volume_in == Decimal("200")

    def test_applied_twice_returns_original(self) -> None:
        bid = Order.new_bid(Decimal("37251.17"), Decimal("0.00431"))
        assert bid.matching_counter_order().matching_counter_order() == bid

    def test_preserves_hit_and_pair(self) -> None:
        hit = object()
        pair = CurrencyPair("ETH", "BTC")
        ask = Order.new_bid(Decimal("0.05"), 3, pair=pair, hit=hit).matching_counter_order()
        assert ask.hit is hit
        assert ask.pair == pair

    def test_undefined_side_fails(self) -> None:
        order = Order.new_bid(100, 2)
        order.side = "sideways"  # type: ignore[assignment]
        with pytest.raises(InvalidOrderSideError, match="invalid side"):
            order.matching_counter_order()

    def test_matching_ask_requires_bid(self) -> None:
        assert Order.new_bid(100, 1).matching_ask().side is OrderSide.ASK
        with pytest.raises(InvalidOrderSideError, match="not a bid"):
            Order.new_ask(100, 1).matching_ask()

    def test_matching_bid_requires_ask(self) -> None:
        assert Order.new_ask(100, 1).matching_bid().side is OrderSide.BID
        with pytest.raises(InvalidOrderSideError, match="not an ask"):
            Order.new_bid(100, 1).matching_bid()


class TestExtremeValues:
    """Very large and non-finite inputs."""

    def test_large_bid_resolves(self) -> None:
        order = Order.new_bid(Decimal("1000000000000"), Decimal("10000000000"))
        assert order.quote_volume == Decimal("1E22")
        assert order.quote_volume_in == Decimal("1E22")
        assert order.base_volume_out == Decimal("9990000000")
        assert order.base_volume_in == 0

    def test_large_ask_resolves(self) -> None:
        order = Order.new_ask(Decimal("1000000000000"), Decimal("10000000000"))
        assert order.base_volume_in == Decimal("10000000000")
        assert order.quote_volume_out == Decimal("9.99E21")

    @pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity", float("nan")])
    def test_non_finite_price_rejected(self, price: object) -> None:
        with pytest.raises(InvalidOrderError, match="price"):
            Order.new_bid(price, 1)  # type: ignore[arg-type]

    def test_non_numeric_price_rejected(self) -> None:
        with pytest.raises(InvalidOrderError, match="not a number"):
            Order.new_ask("abc", 1)

    @pytest.mark.parametrize("volume", ["NaN", "Infinity"])
    def test_non_finite_volumes_rejected(self, volume: str) -> None:
        order = Order.new_bid(100, 2)
        with pytest.raises(InvalidOrderError, match="base volume"):
            order.set_base_volume(volume)
        with pytest.raises(InvalidOrderError, match="quote volume"):
            order.set_quote_volume(volume)
        assert order.base_volume == Decimal("2")

    def test_non_finite_progress_rejected(self) -> None:
        with pytest.raises(InvalidOrderError, match="progress"):
            Order.new_bid(100, 2).set_progress("NaN")
