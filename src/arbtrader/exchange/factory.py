"""Builds one Exchange per configured venue.

Build sequence for a venue (strictly sequential for one venue, independent
across venues):
1. Look up the venue configuration
2. Select the provider for the venue name (unknown names fail here)
3. Bind the provider's four capabilities into a new Exchange
4. Load venue settings, then apply credentials from config
5. Fetch the portfolio and hand it to the PortfolioManager (non-fatal)
6. Return the Exchange
"""

import asyncio
from collections.abc import Callable, Iterable, Mapping

from arbtrader.config import AppSettings, VenueSettings
from arbtrader.core.exchange import Exchange
from arbtrader.exceptions import UnknownVenueError
from arbtrader.exchange.provider import ExchangeProvider
from arbtrader.exchange.venues import KNOWN_PROVIDERS
from arbtrader.logging import bind_venue, get_logger
from arbtrader.portfolio.manager import PortfolioManager, new_portfolio_state_from_positions

logger = get_logger(__name__)

ProviderFactory = Callable[[VenueSettings], ExchangeProvider]


class ExchangeFactory:
    """Creates fully wired Exchange instances.

    Args:
        settings: Application settings holding per-venue configuration.
        portfolio_manager: Shared portfolio state fed with each venue's holdings.
        providers: Venue name to provider constructor. Defaults to the known venues.
    """

    def __init__(
        self,
        settings: AppSettings,
        portfolio_manager: PortfolioManager,
        providers: Mapping[str, ProviderFactory] | None = None,
    ) -> None:
        self._settings = settings
        self._portfolio_manager = portfolio_manager
        self._providers = dict(KNOWN_PROVIDERS if providers is None else providers)

    @property
    def known_venues(self) -> list[str]:
        return sorted(self._providers)

    async def build_exchange(self, name: str) -> Exchange:
        """Build the Exchange for venue ``name``.

        Raises:
            UnknownVenueError: If no provider is registered for ``name``.
            Exception: Settings-loading errors from the provider propagate.
        """
        with bind_venue(name):
            provider_factory = self._providers.get(name)
            if provider_factory is None:
                raise UnknownVenueError(
                    f"No provider for venue {name!r}; known venues: {self.known_venues}"
                )

            config = self._settings.venue(name)
            if config is None:
                logger.warning("venue_not_configured", note="No pairs and no credentials")
                config = VenueSettings()
            logger.info("building_exchange", pairs_enabled=config.pairs_enabled)

            exchange = Exchange(name)
            exchange.load_pairs_enabled(config.pairs_enabled, self._settings.pair_delimiter)
            exchange.bind(provider_factory(config))

            try:
                await exchange.load_settings()
            except Exception:
                await exchange.close()
                raise
            exchange.apply_credentials(config.api_key, config.api_secret)

            await self._load_portfolio(exchange)

            logger.info(
                "exchange_built",
                pairs=[pair.symbol for pair in exchange.pairs_enabled],
                has_credentials=exchange.settings.has_credentials,
            )
            return exchange

    async def build_exchanges(self, names: Iterable[str]) -> list[Exchange]:
        """Build several venues concurrently, in the order given.

        If any build fails, the venues that did build are closed and the
        first error is raised.
        """
        results = await asyncio.gather(
            *(self.build_exchange(name) for name in names), return_exceptions=True
        )
        errors = [result for result in results if isinstance(result, BaseException)]
        if errors:
            for result in results:
                if isinstance(result, Exchange):
                    await result.close()
            raise errors[0]
        return list(results)

    async def _load_portfolio(self, exchange: Exchange) -> None:
        # A missing portfolio never prevents the exchange from being used
        try:
            portfolio = await exchange.get_portfolio()
        except Exception as e:
            logger.error("portfolio_fetch_failed", error=str(e), exc_info=True)
            return

        state = new_portfolio_state_from_positions(portfolio.positions, exchange=exchange.name)
        await self._portfolio_manager.update_with_new_state(state, incremental=False)
        logger.info("portfolio_loaded", positions=len(portfolio.positions))
