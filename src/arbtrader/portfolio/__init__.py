"""Portfolio state shared across venues."""

from arbtrader.portfolio.manager import (
    PortfolioManager,
    PortfolioState,
    new_portfolio_state_from_positions,
)

__all__ = ["PortfolioManager", "PortfolioState", "new_portfolio_state_from_positions"]
