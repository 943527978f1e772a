"""Entry point: build every enabled venue and report the starting portfolio.

Component wiring order:
1. AppSettings (configuration)
2. Logging setup
3. PortfolioManager (shared across venues)
4. ExchangeFactory
5. One Exchange per enabled venue, built concurrently
"""

import asyncio

from arbtrader.config import AppSettings
from arbtrader.core.exchange import Exchange
from arbtrader.exchange.factory import ExchangeFactory
from arbtrader.logging import get_logger, setup_logging
from arbtrader.portfolio.manager import PortfolioManager


async def run(settings: AppSettings | None = None) -> list[Exchange]:
    """Build the enabled venues, log the portfolio snapshot, then close them.

    Returns:
        The exchanges that were built (already closed).
    """
    # 1. Load settings
    settings = settings or AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level)
    logger = get_logger("arbtrader.main")

    # 3-4. Shared portfolio and factory
    portfolio_manager = PortfolioManager()
    factory = ExchangeFactory(settings, portfolio_manager)

    names = settings.exchanges_enabled or list(settings.exchanges)
    if not names:
        logger.warning("no_exchanges_enabled")
        return []

    # 5. Build venues
    exchanges = await factory.build_exchanges(names)
    try:
        snapshot = await portfolio_manager.snapshot()
        for venue, holdings in snapshot.balances.items():
            logger.info(
                "starting_portfolio",
                exchange=venue,
                holdings={currency: str(amount) for currency, amount in holdings.items()},
            )
    finally:
        for exchange in exchanges:
            await exchange.close()
        logger.info("exchanges_closed", count=len(exchanges))
    return exchanges


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
