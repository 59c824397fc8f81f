"""
USDC amount conversion.

Amounts are stored as non-negative integer strings in the token's smallest
unit (6 decimals for USDC). Conversion uses integer and Decimal arithmetic
only, so values round-trip exactly.
"""

import re
from decimal import ROUND_HALF_UP, Decimal

from .exceptions import InvalidAmountError

USDC_DECIMALS = 6

_DISPLAY_RE = re.compile(r"^(?P<whole>\d+)(?:\.(?P<frac>\d+))?$")
_BASE_UNITS_RE = re.compile(r"^\d+$")


def parse_base_units(value: str) -> int:
    """
    Validate a base-unit amount string and return it as an int.

    Raises:
        InvalidAmountError: If value is not a non-negative integer string
    """
    if not isinstance(value, str) or not _BASE_UNITS_RE.match(value.strip()):
        raise InvalidAmountError(str(value), "must be a non-negative integer string")
    return int(value.strip())


def to_base_units(amount: str, decimals: int = USDC_DECIMALS) -> str:
    """
    Convert a display amount to base units.

    Examples:
        >>> to_base_units("12.5")
        '12500000'
        >>> to_base_units("0.000001")
        '1'
    """
    match = _DISPLAY_RE.match(str(amount).strip())
    if not match:
        raise InvalidAmountError(str(amount), "must be a non-negative decimal number")

    frac = match.group("frac") or ""
    if len(frac) > decimals:
        raise InvalidAmountError(str(amount), f"at most {decimals} decimal places")

    whole = int(match.group("whole"))
    return str(whole * 10**decimals + int(frac.ljust(decimals, "0") or "0"))


def format_amount(base_units: str, decimals: int = USDC_DECIMALS) -> str:
    """
    Convert base units to a display amount without trailing zeros.

    Examples:
        >>> format_amount("12500000")
        '12.5'
        >>> format_amount("1000000")
        '1'
    """
    whole, frac = divmod(parse_base_units(base_units), 10**decimals)
    frac_digits = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_digits}" if frac_digits else str(whole)


def format_usd(base_units: str, decimals: int = USDC_DECIMALS) -> str:
    """Dollar string with thousands separators and cents, e.g. ``$1,234.50``."""
    value = Decimal(parse_base_units(base_units)) / (Decimal(10) ** decimals)
    cents = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"${cents:,.2f}"


def sum_base_units(values: list[str]) -> str:
    """Sum base-unit strings."""
    return str(sum(parse_base_units(v) for v in values))
