"""Configuration system using pydantic-settings with environment variable loading.

Venue configuration is keyed by venue name, e.g. in ``.env``::

    EXCHANGES='{"Binance": {"pairs_enabled": "BTC/USDT,ETH/BTC", "api_key": "..."}}'
    EXCHANGES_ENABLED='["Binance"]'
"""

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class VenueSettings(BaseModel):
    """Connection settings for a single venue."""

    pairs_enabled: str = ""  # delimiter-separated, e.g. "BTC/USDT,ETH/BTC"
    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")
    demo_trading: bool = False
    orderbook_depth: int = 20


class AppSettings(BaseSettings):
    """Root application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    pair_delimiter: str = ","
    exchanges: dict[str, VenueSettings] = {}
    exchanges_enabled: list[str] = []

    def venue(self, name: str) -> VenueSettings | None:
        """Return the configuration for ``name``, or None if the venue is not configured."""
        return self.exchanges.get(name)
