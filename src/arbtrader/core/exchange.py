"""Venue-agnostic exchange abstraction.

An Exchange holds the identity, enabled pairs and settings of one venue plus
four callables bound once from that venue's provider. Engines work against
this object only; they never see the provider or branch on the venue name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arbtrader.core.order import Order
from arbtrader.exceptions import (
    ExchangeAlreadyBoundError,
    ExchangeNotConfiguredError,
    InvalidOrderError,
)
from arbtrader.logging import get_logger
from arbtrader.models import (
    CurrencyPair,
    ExchangeSettings,
    OrderDispatched,
    Orderbook,
    Portfolio,
)

if TYPE_CHECKING:
    from pydantic import SecretStr

    from arbtrader.exchange.provider import (
        CloseFunc,
        ExchangeProvider,
        OrderbookFunc,
        PortfolioFunc,
        PostOrderFunc,
        SettingsFunc,
    )

logger = get_logger(__name__)


class Exchange:
    """Uniform callable surface over one venue.

    Args:
        name: Venue name, e.g. "Binance".
        settings: Initial settings; replaced by ``load_settings``.
    """

    def __init__(self, name: str, settings: ExchangeSettings | None = None) -> None:
        self.name = name
        self.settings = settings or ExchangeSettings()
        self.pairs_enabled: list[CurrencyPair] = []
        self._fetch_settings: SettingsFunc | None = None
        self._fetch_orderbook: OrderbookFunc | None = None
        self._fetch_portfolio: PortfolioFunc | None = None
        self._post_order: PostOrderFunc | None = None
        self._close: CloseFunc | None = None

    def __repr__(self) -> str:
        pairs = ",".join(pair.symbol for pair in self.pairs_enabled)
        return f"Exchange(name={self.name!r}, pairs=[{pairs}], bound={self.is_bound})"

    @property
    def is_bound(self) -> bool:
        return self._fetch_settings is not None

    def bind(self, provider: ExchangeProvider) -> None:
        """Resolve the provider's four capabilities into stored callables.

        Each binding method is called exactly once. No reference to the
        provider itself is kept.

        Raises:
            ExchangeAlreadyBoundError: If a provider was already bound.
        """
        if self.is_bound:
            raise ExchangeAlreadyBoundError(f"{self.name}: operations already bound")
        self._fetch_settings = provider.bind_settings()
        self._fetch_orderbook = provider.bind_orderbook()
        self._fetch_portfolio = provider.bind_portfolio()
        self._post_order = provider.bind_post_order()
        self._close = provider.bind_close()

    def load_pairs_enabled(self, raw: str, delimiter: str = ",") -> list[CurrencyPair]:
        """Parse a delimiter-separated pair list, dropping blanks and duplicates.

        Raises:
            ValueError: If an entry is not a valid pair.
        """
        pairs: list[CurrencyPair] = []
        for chunk in raw.split(delimiter):
            if not chunk.strip():
                continue
            pair = CurrencyPair.parse(chunk)
            if pair not in pairs:
                pairs.append(pair)
        self.pairs_enabled = pairs
        return pairs

    def is_pair_enabled(self, pair: CurrencyPair) -> bool:
        return pair in self.pairs_enabled

    def apply_credentials(self, api_key: SecretStr, api_secret: SecretStr) -> None:
        """Store the credentials used for portfolio and order calls."""
        self.settings.api_key = api_key
        self.settings.api_secret = api_secret

    async def get_settings(self) -> ExchangeSettings:
        """Fetch venue-wide settings without storing them."""
        if self._fetch_settings is None:
            raise self._not_configured("get_settings")
        return await self._fetch_settings()

    async def load_settings(self) -> ExchangeSettings:
        """Fetch venue-wide settings and store them, keeping current credentials."""
        settings = await self.get_settings()
        settings.api_key = self.settings.api_key
        settings.api_secret = self.settings.api_secret
        self.settings = settings
        logger.debug(
            "exchange_settings_loaded",
            exchange=self.name,
            taker_fee=str(settings.taker_fee),
            pair_count=len(settings.pairs),
        )
        return settings

    async def get_orderbook(self, pair: CurrencyPair) -> Orderbook:
        """Fetch the current book for ``pair``."""
        if self._fetch_orderbook is None:
            raise self._not_configured("get_orderbook")
        return await self._fetch_orderbook(pair)

    async def get_portfolio(self) -> Portfolio:
        """Fetch account positions using the stored credentials."""
        if self._fetch_portfolio is None:
            raise self._not_configured("get_portfolio")
        return await self._fetch_portfolio(self.settings)

    async def post_order(self, order: Order) -> OrderDispatched:
        """Submit ``order`` to the venue.

        Raises:
            ExchangeNotConfiguredError: If no provider is bound.
            InvalidOrderError: If the order has no pair or its pair is not enabled.
        """
        if self._post_order is None:
            raise self._not_configured("post_order")
        if order.pair is None:
            raise InvalidOrderError(f"{self.name}: order has no pair")
        if not self.is_pair_enabled(order.pair):
            raise InvalidOrderError(f"{self.name}: pair {order.pair} is not enabled")
        return await self._post_order(order, self.settings)

    async def close(self) -> None:
        """Release provider resources. Safe to call more than once."""
        close, self._close = self._close, None
        if close is not None:
            await close()

    def _not_configured(self, operation: str) -> ExchangeNotConfiguredError:
        return ExchangeNotConfiguredError(
            f"{self.name}: no provider bound, cannot {operation}"
        )
