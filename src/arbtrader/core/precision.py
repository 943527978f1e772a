"""Volume precision helpers.

All monetary values use Decimal. Exchanges reject volumes finer than their
tick size, so derived volumes are truncated (never rounded up) before they
reach a venue.
"""

from decimal import ROUND_DOWN, Decimal, localcontext

VOLUME_DIGITS = 8

_QUANTS: dict[int, Decimal] = {}


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """Convert a boundary value to Decimal, going through str() for floats."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def truncate(value: Decimal | float | int | str, digits: int) -> Decimal:
    """Truncate ``value`` toward zero at ``digits`` fractional digits.

    Args:
        value: The raw amount.
        digits: Number of fractional digits to keep.

    Returns:
        The truncated Decimal. Truncating twice yields the same value.

    Raises:
        decimal.InvalidOperation: If ``value`` is NaN or infinite.
    """
    quant = _QUANTS.get(digits)
    if quant is None:
        quant = _QUANTS[digits] = Decimal(1).scaleb(-digits)
    value = to_decimal(value)
    with localcontext() as ctx:
        # integer digits + kept fractional digits must fit the precision
        ctx.prec = max(ctx.prec, value.adjusted() + digits + 2)
        return value.quantize(quant, rounding=ROUND_DOWN)


def trunc8(value: Decimal | float | int | str) -> Decimal:
    """Truncate toward zero at the 8th fractional digit."""
    return truncate(value, VOLUME_DIGITS)
