"""Custom exceptions for the arbitrage trading core.

Order-model, exchange-abstraction and portfolio exceptions live here
to avoid circular imports between modules. Venue errors raised by ccxt
are not wrapped and reach callers unchanged.
"""


class TradingError(Exception):
    """Base exception for all trading core errors."""


class InvalidOrderError(TradingError):
    """Raised when an order is built or updated with invalid price or volume."""


class InvalidOrderSideError(InvalidOrderError):
    """Raised when an order side is not one of the defined sides."""


class UnknownVenueError(TradingError):
    """Raised when no provider exists for the requested venue name."""


class ExchangeNotConfiguredError(TradingError):
    """Raised when an exchange operation is called before provider binding."""


class ExchangeAlreadyBoundError(TradingError):
    """Raised when a provider is bound to an exchange a second time."""


class PortfolioError(TradingError):
    """Raised when a portfolio update would leave an invalid state."""
