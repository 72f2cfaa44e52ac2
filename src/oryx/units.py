from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, localcontext

from .constants import MAX_RAW_AMOUNT, MAX_TOKEN_DECIMALS
from .errors import AmountOverflowError

# Enough significant digits for any 256-bit integer
DECIMAL_PRECISION = 100

_WHOLE = Decimal(1)
_CENTS = Decimal("0.01")


def check_raw_amount(value: int, label: str = "amount") -> int:
    """Validate a raw on-chain amount against the supported 128-bit range.

    Args:
        value: Unscaled integer amount as returned by the contract.
        label: Name used in the error message.

    Returns:
        ``value`` unchanged.

    Raises:
        AmountOverflowError: If ``value`` is at or above ``2**128``.
        ValueError: If ``value`` is negative.
    """
    if value < 0:
        raise ValueError(f"{label} must be non-negative, got {value}")
    if value >= MAX_RAW_AMOUNT:
        raise AmountOverflowError(
            f"{label} {value} exceeds the supported 128-bit range"
        )
    return value


def scale_amount(value: int, decimals: int) -> Decimal:
    """Scale a raw integer amount down by ``10**decimals``.

    Args:
        value: Non-negative integer amount with ``decimals`` decimal places.
        decimals: Token decimals, between 0 and 255.

    Returns:
        The scaled amount truncated to zero fractional digits.

    Notes:
        - Division runs in a local decimal context wide enough for 256-bit
          values, so no digits are lost before truncation.
        - Truncation happens here, so anything derived from the result
          (such as the pool ratio) works on whole units.
    """
    if value < 0:
        raise ValueError(f"amount must be non-negative, got {value}")
    if not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise ValueError(f"decimals must be between 0 and 255, got {decimals}")
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        scaled = Decimal(value) / (Decimal(10) ** decimals)
        return scaled.quantize(_WHOLE, rounding=ROUND_DOWN)


def divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide two decimals in the wide local context."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return numerator / denominator


def truncate_to_cents(value: Decimal) -> Decimal:
    """Truncate ``value`` to exactly two fractional digits."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return value.quantize(_CENTS, rounding=ROUND_DOWN)
