"""Value units: integer base units, decimal parsing and formatting."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

DECIMALS = 18
UNIT = 10**DECIMALS  # base units per native unit

MIN_STAKE = UNIT // 100  # 0.01 native
PLATFORM_FEE = 2  # percent of total pool, retained at distribution


def parse_amount(text: str | int | Decimal) -> int:
    """Convert a human amount ("1.5") to base units. Rejects negatives and sub-unit precision."""
    try:
        value = Decimal(str(text).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {text!r}") from e
    if not value.is_finite() or value < 0:
        raise ValueError(f"Amount must be a non-negative number: {text!r}")
    scaled = value.scaleb(DECIMALS)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount has more than {DECIMALS} decimal places: {text!r}")
    return int(scaled)


def format_amount(amount: int) -> str:
    """Render base units as a native-unit decimal string without trailing zeros."""
    whole, frac = divmod(abs(amount), UNIT)
    sign = "-" if amount < 0 else ""
    if frac == 0:
        return f"{sign}{whole}"
    digits = str(frac).rjust(DECIMALS, "0").rstrip("0")
    return f"{sign}{whole}.{digits}"
