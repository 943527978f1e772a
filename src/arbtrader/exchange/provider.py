"""Abstract venue provider interface.

Defines the contract every venue implementation must satisfy. Each binding
method returns the actual coroutine function, closed over the provider's own
client and state. The Exchange abstraction calls every binding method once
and afterwards only holds the returned callables, so engine code never
branches on venue identity.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from arbtrader.core.order import Order
from arbtrader.models import (
    CurrencyPair,
    ExchangeSettings,
    OrderDispatched,
    Orderbook,
    Portfolio,
)

SettingsFunc = Callable[[], Awaitable[ExchangeSettings]]
OrderbookFunc = Callable[[CurrencyPair], Awaitable[Orderbook]]
PortfolioFunc = Callable[[ExchangeSettings], Awaitable[Portfolio]]
PostOrderFunc = Callable[[Order, ExchangeSettings], Awaitable[OrderDispatched]]
CloseFunc = Callable[[], Awaitable[None]]


class ExchangeProvider(ABC):
    """Abstract base class for venue providers.

    All four trading capabilities are mandatory. The callables returned must
    be safe to invoke concurrently.
    """

    @abstractmethod
    def bind_settings(self) -> SettingsFunc:
        """Return a callable fetching venue-wide fees and pair metadata."""
        ...

    @abstractmethod
    def bind_orderbook(self) -> OrderbookFunc:
        """Return a callable fetching the current book for a pair."""
        ...

    @abstractmethod
    def bind_portfolio(self) -> PortfolioFunc:
        """Return a callable fetching account positions with the given credentials."""
        ...

    @abstractmethod
    def bind_post_order(self) -> PostOrderFunc:
        """Return a callable submitting an Order with the given credentials."""
        ...

    def bind_close(self) -> CloseFunc:
        """Return a callable releasing provider resources.

        Providers holding no resources can keep this no-op.
        """

        async def close() -> None:
            return None

        return close
