"""Conversion between Decimal amounts and integer minor units."""

import logging
from decimal import ROUND_HALF_UP, Decimal

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal, exponent: int) -> int:
    """
    Convert a Decimal amount to an integer count of minor units.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Amount in major units (e.g. dollars)
        exponent: Decimal places of the currency's minor unit

    Returns:
        Amount in minor units (e.g. cents)
    """
    scaled = Decimal(amount).scaleb(exponent)
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(units: int, exponent: int) -> Decimal:
    """Convert minor units back to a Decimal quantized to the minor unit."""
    return Decimal(units).scaleb(-exponent).quantize(Decimal(1).scaleb(-exponent))


def has_excess_precision(amount: Decimal, exponent: int) -> bool:
    """True if the amount carries more decimal places than the currency allows."""
    normalized = Decimal(amount).normalize()
    digits_exponent = normalized.as_tuple().exponent
    return isinstance(digits_exponent, int) and digits_exponent < -exponent
