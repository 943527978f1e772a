"""Shared portfolio state across venues.

The manager is a single instance handed to every exchange-construction call
rather than a process global, so tests can build isolated ones.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from arbtrader.exceptions import PortfolioError
from arbtrader.logging import get_logger
from arbtrader.models import Position

logger = get_logger(__name__)


@dataclass
class PortfolioState:
    """Holdings keyed by exchange, then currency.

    A venue present with an empty mapping means "this venue holds nothing",
    which lets a full refresh clear stale holdings.
    """

    balances: dict[str, dict[str, Decimal]] = field(default_factory=dict)

    @property
    def exchanges(self) -> list[str]:
        return list(self.balances)

    def get(self, exchange: str, currency: str) -> Decimal:
        return self.balances.get(exchange, {}).get(currency, Decimal("0"))


def new_portfolio_state_from_positions(
    positions: Iterable[Position], exchange: str | None = None
) -> PortfolioState:
    """Fold a position list into a PortfolioState.

    Amounts for the same exchange and currency are summed.

    Args:
        positions: Positions as reported by a venue.
        exchange: Venue the snapshot covers; included even when it has no positions.
    """
    balances: dict[str, dict[str, Decimal]] = {}
    if exchange is not None:
        balances[exchange] = {}
    for position in positions:
        venue = balances.setdefault(position.exchange, {})
        venue[position.currency] = venue.get(position.currency, Decimal("0")) + position.amount
    return PortfolioState(balances=balances)


class PortfolioManager:
    """Process-wide portfolio state, updated by every venue.

    Writes are serialised with an asyncio.Lock so venues built concurrently
    cannot interleave their updates.
    """

    def __init__(self) -> None:
        self._state = PortfolioState()
        self._lock = asyncio.Lock()

    async def update_with_new_state(self, state: PortfolioState, incremental: bool) -> None:
        """Merge ``state`` into the current portfolio.

        Non-incremental updates replace every holding of the venues present
        in ``state``; other venues are untouched. Incremental updates add the
        amounts in ``state`` to the current ones.

        Raises:
            PortfolioError: If an incremental update would make a balance negative.
        """
        async with self._lock:
            if incremental:
                merged = {venue: dict(holdings) for venue, holdings in self._state.balances.items()}
                for venue, holdings in state.balances.items():
                    current = merged.setdefault(venue, {})
                    for currency, amount in holdings.items():
                        total = current.get(currency, Decimal("0")) + amount
                        if total < 0:
                            raise PortfolioError(
                                f"{venue}: {currency} balance would become {total}"
                            )
                        current[currency] = total
                self._state = PortfolioState(balances=merged)
            else:
                balances = dict(self._state.balances)
                for venue, holdings in state.balances.items():
                    balances[venue] = dict(holdings)
                self._state = PortfolioState(balances=balances)

            logger.info(
                "portfolio_state_updated",
                exchanges=state.exchanges,
                incremental=incremental,
            )

    async def get_balance(self, exchange: str, currency: str) -> Decimal:
        """Return the held amount of ``currency`` on ``exchange`` (0 if unknown)."""
        async with self._lock:
            return self._state.get(exchange, currency)

    async def snapshot(self) -> PortfolioState:
        """Return a copy of the current state."""
        async with self._lock:
            return PortfolioState(
                balances={venue: dict(holdings) for venue, holdings in self._state.balances.items()}
            )
