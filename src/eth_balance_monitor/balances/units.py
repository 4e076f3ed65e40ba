"""Conversion between wei and ether display units."""

from __future__ import annotations

from decimal import Decimal, localcontext

WEI_DECIMALS = 18
WEI_PER_ETHER = Decimal(10) ** WEI_DECIMALS

# uint256 has 78 significant digits
_PRECISION = 80


def to_display_units(raw: int) -> float:
    """Convert a wei balance to ether.

    The division is done in Decimal so large balances keep their low-order
    digits until the final narrowing to float.

    Args:
        raw: Balance in wei.

    Returns:
        Balance in ether.

    Raises:
        ValueError: If the balance is negative.
    """
    if raw < 0:
        raise ValueError(f"balance cannot be negative: {raw}")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(Decimal(raw) / WEI_PER_ETHER)


def to_smallest_units(value: Decimal | float | str) -> int:
    """Convert an ether amount to wei, truncating sub-wei fractions."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return int(Decimal(str(value)) * WEI_PER_ETHER)
