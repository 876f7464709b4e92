"""Exact 18-decimal fixed-point arithmetic and display formatting.

Every monetary quantity in the monitor is an ``int`` scaled by 1e18
("wei"). Floats never enter the numeric path.
"""

from __future__ import annotations

from decimal import Decimal

FIXED_POINT_DECIMALS = 18
FIXED_POINT_SCALE = 10 ** FIXED_POINT_DECIMALS

INVALID_MARKER = "[Invalid]"


def to_wei(value: int | str | Decimal) -> int:
    """Scale a whole-unit value to wei, truncating beyond 18 decimals.

    >>> to_wei("1.5")
    1500000000000000000
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"refusing lossy conversion of {type(value).__name__} to wei")
    if isinstance(value, int):
        return value * FIXED_POINT_SCALE
    return int(Decimal(value) * FIXED_POINT_SCALE)


def from_wei(value: int) -> Decimal:
    """Exact Decimal view of a wei amount."""
    return Decimal(int(value)).scaleb(-FIXED_POINT_DECIMALS)


def collateralization_ratio_percent(collateral: int, tokens_outstanding: int, price: int) -> int:
    """Collateralization as a wei-scaled percentage.

    cr = collateral * 1e18 * 1e18 / (tokens_outstanding * price) * 100

    Multiplications happen before the single division; the result is
    truncated once and then scaled to percent.
    """
    if tokens_outstanding == 0:
        raise ZeroDivisionError("collateralization ratio: tokens_outstanding is zero")
    if price == 0:
        raise ZeroDivisionError("collateralization ratio: price is zero")
    return (
        collateral * FIXED_POINT_SCALE * FIXED_POINT_SCALE
        // (tokens_outstanding * price)
        * 100
    )


def disputable_price_threshold(
    collateral_requirement: int,
    liquidated_collateral: int,
    liquidated_tokens: int,
) -> int:
    """Price below which a liquidation would have been invalid.

    price = (liquidated_collateral * 1e18 / liquidated_tokens) * 1e18 / collateral_requirement
    """
    if liquidated_tokens == 0:
        raise ZeroDivisionError("disputable price: liquidated_tokens is zero")
    if collateral_requirement == 0:
        raise ZeroDivisionError("disputable price: collateral_requirement is zero")
    return (
        liquidated_collateral * FIXED_POINT_SCALE
        // liquidated_tokens
        * FIXED_POINT_SCALE
        // collateral_requirement
    )


def format_decimal(value: int | None, decimals: int = 2, min_precision: int = 4) -> str:
    """Render a wei amount for humans.

    Values >= 1 are truncated to ``decimals`` places (``200.00``). Values
    below 1 keep ``min_precision`` significant digits, trimmed of trailing
    zeros but never below ``decimals`` places (``0.50``, ``0.002218``), so a
    nonzero amount never collapses to ``0.00``. None renders as
    ``[Invalid]``.
    """
    if value is None:
        return INVALID_MARKER
    value = int(value)
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), FIXED_POINT_SCALE)
    frac_str = str(frac).zfill(FIXED_POINT_DECIMALS)

    if whole >= 1:
        if decimals == 0:
            return f"{sign}{whole}"
        return f"{sign}{whole}.{frac_str[:decimals]}"

    if frac == 0:
        return "0." + "0" * decimals if decimals else "0"

    leading_zeros = len(frac_str) - len(frac_str.lstrip("0"))
    keep = min(max(leading_zeros + min_precision, decimals), FIXED_POINT_DECIMALS)
    digits = frac_str[:keep].rstrip("0").ljust(decimals, "0")
    return f"{sign}0.{digits}"
