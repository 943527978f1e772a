"""Venue layer -- provider contract, ccxt providers and the exchange factory."""

from arbtrader.exchange.ccxt_provider import CcxtProvider
from arbtrader.exchange.factory import ExchangeFactory
from arbtrader.exchange.provider import ExchangeProvider
from arbtrader.exchange.venues import KNOWN_PROVIDERS, BinanceProvider, BybitProvider

__all__ = [
    "BinanceProvider",
    "BybitProvider",
    "CcxtProvider",
    "ExchangeFactory",
    "ExchangeProvider",
    "KNOWN_PROVIDERS",
]
