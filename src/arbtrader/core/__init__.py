"""Core trading values -- order math and the exchange abstraction."""

from arbtrader.core.exchange import Exchange
from arbtrader.core.order import Order
from arbtrader.core.precision import trunc8, truncate

__all__ = ["Exchange", "Order", "trunc8", "truncate"]
