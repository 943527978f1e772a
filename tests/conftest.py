"""Shared test fixtures for the arbitrage trading core."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from arbtrader.config import AppSettings, VenueSettings
from arbtrader.exchange.provider import ExchangeProvider
from arbtrader.models import (
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

BTC_USDT = CurrencyPair("BTC", "USDT")


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with one fake venue configured (dummy API keys)."""
    return AppSettings(
        log_level="DEBUG",
        exchanges={
            "Fake": VenueSettings(
                pairs_enabled="BTC/USDT,ETH/BTC",
                api_key="test-api-key",  # type: ignore[arg-type]
                api_secret="test-api-secret",  # type: ignore[arg-type]
            ),
        },
    )


@pytest.fixture
def mock_provider() -> MagicMock:
    """Provider whose bound callables are AsyncMocks with canned venue responses."""
    provider = MagicMock(spec=ExchangeProvider)
    provider.bind_settings.return_value = AsyncMock(
        return_value=ExchangeSettings(
            taker_fee=Decimal("0.002"),
            maker_fee=Decimal("0.001"),
            pairs={"BTC/USDT": PairSettings(pair=BTC_USDT)},
        )
    )
    provider.bind_orderbook.return_value = AsyncMock(
        return_value=Orderbook(
            pair=BTC_USDT,
            bids=[OrderbookLevel(Decimal("100"), Decimal("1"))],
            asks=[OrderbookLevel(Decimal("101"), Decimal("2"))],
        )
    )
    provider.bind_portfolio.return_value = AsyncMock(
        return_value=Portfolio(
            exchange="Fake",
            positions=[
                Position(exchange="Fake", currency="BTC", amount=Decimal("1.5")),
                Position(exchange="Fake", currency="USDT", amount=Decimal("2500")),
            ],
        )
    )
    provider.bind_post_order.return_value = AsyncMock(
        return_value=OrderDispatched(
            order_id="42",
            symbol="BTC/USDT",
            side=OrderSide.BID,
            price=Decimal("100"),
            accepted_volume=Decimal("2"),
        )
    )
    provider.bind_close.return_value = AsyncMock()
    return provider
