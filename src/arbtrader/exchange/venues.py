"""Concrete venue providers and the closed registry of known venues."""

from arbtrader.exchange.ccxt_provider import CcxtProvider


class BinanceProvider(CcxtProvider):
    """Binance spot."""

    exchange_id = "binance"
    venue_name = "Binance"


class BybitProvider(CcxtProvider):
    """Bybit spot (unified account)."""

    exchange_id = "bybit"
    venue_name = "Bybit"

    def _build_config(self) -> dict:
        config = super()._build_config()
        # Override URLs for Bybit Demo Trading API
        if self._venue.demo_trading:
            config["urls"] = {
                "api": {
                    "public": "https://api-demo.bybit.com",
                    "private": "https://api-demo.bybit.com",
                },
            }
        return config


KNOWN_PROVIDERS: dict[str, type[CcxtProvider]] = {
    BinanceProvider.venue_name: BinanceProvider,
    BybitProvider.venue_name: BybitProvider,
}
