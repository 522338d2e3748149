"""
Conversion between human-readable decimal strings and integer base units.

All arithmetic is done on Python integers. Floats are never accepted.

Rendering rule: ``to_decimal_string`` produces the minimal form. Trailing
fractional zeros are trimmed and whole values carry no decimal point, so
``10**18`` at 18 decimals renders as ``"1"`` and ``1500`` at 3 decimals
renders as ``"1.5"``.
"""
import re
from typing import Tuple

from .exceptions import InvalidAmount

# Native currency precision (wei per ether)
ETHER_DECIMALS = 18

# ERC-20 decimals() is a uint8
MAX_DECIMALS = 255

# Every on-chain value is a uint256
UINT256_MAX = 2 ** 256 - 1

# 78 whole digits cover uint256; the fraction is bounded by MAX_DECIMALS
MAX_AMOUNT_LENGTH = len(str(UINT256_MAX)) + 1 + MAX_DECIMALS

_DECIMAL_RE = re.compile(r"([0-9]+)(?:\.([0-9]+))?", re.ASCII)


def _check_decimals(decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValueError(f"decimals must be an int, got {type(decimals).__name__}")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ValueError(f"decimals must be between 0 and {MAX_DECIMALS}, got {decimals}")


def parse_decimal(amount: str) -> Tuple[str, str]:
    """
    Split a decimal string into its whole and fractional digit strings.

    Args:
        amount: String of the form ``digits[.digits]``

    Returns:
        Tuple of (whole_digits, fraction_digits); fraction may be empty

    Raises:
        InvalidAmount: If the string is not a plain unsigned decimal
    """
    if not isinstance(amount, str):
        raise InvalidAmount(f"Amount must be a decimal string, got {type(amount).__name__}")
    if len(amount) > MAX_AMOUNT_LENGTH:
        raise InvalidAmount(f"Amount is too long: {len(amount)} characters")

    match = _DECIMAL_RE.fullmatch(amount)
    if match is None:
        raise InvalidAmount(f"Invalid decimal amount: {amount!r}")

    return match.group(1), match.group(2) or ""


def to_base_units(amount: str, decimals: int) -> int:
    """
    Convert a decimal string to an integer number of base units.

    Args:
        amount: Decimal string such as ``"0.001"`` or ``"10"``
        decimals: Number of fractional digits in one whole unit

    Returns:
        Integer base-unit value (e.g. wei)

    Raises:
        InvalidAmount: If the amount is malformed, has more fractional
            digits than ``decimals`` or exceeds uint256
        ValueError: If ``decimals`` is out of range
    """
    _check_decimals(decimals)
    whole, fraction = parse_decimal(amount)

    if len(fraction) > decimals:
        raise InvalidAmount(
            f"Amount {amount!r} has {len(fraction)} fractional digits, "
            f"at most {decimals} allowed"
        )

    value = int(whole) * 10 ** decimals + int(fraction.ljust(decimals, "0") or "0")
    if value > UINT256_MAX:
        raise InvalidAmount(f"Amount {amount!r} does not fit in uint256 at {decimals} decimals")
    return value


def to_decimal_string(value: int, decimals: int) -> str:
    """
    Render an integer base-unit value as a minimal decimal string.

    Args:
        value: Non-negative number of base units
        decimals: Number of fractional digits in one whole unit

    Returns:
        Decimal string without trailing fractional zeros

    Raises:
        InvalidAmount: If ``value`` is not an int in the uint256 range
        ValueError: If ``decimals`` is out of range
    """
    _check_decimals(decimals)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"Base-unit value must be an int, got {type(value).__name__}")
    if value < 0:
        raise InvalidAmount(f"Base-unit value must be non-negative, got {value}")
    if value > UINT256_MAX:
        raise InvalidAmount("Base-unit value does not fit in uint256")

    if decimals == 0:
        return str(value)

    whole, fraction = divmod(value, 10 ** decimals)
    if fraction == 0:
        return str(whole)

    return f"{whole}.{str(fraction).zfill(decimals).rstrip('0')}"
