"""Display formatting for amounts and totals."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..profiles.profile_manager import get_profile

Number = Union[Decimal, int, float]


def format_amount(value: Number, decimals: Optional[int] = None) -> str:
    """Format an amount with thousands separators and fixed decimals.

    Rounds half-up, e.g. Decimal("1234.5") -> "1,234.50". Decimals default
    to the active profile's amount_decimals.
    """
    if decimals is None:
        decimals = get_profile().amount_decimals
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:,.{decimals}f}"


def format_delta(value: Number, decimals: Optional[int] = None) -> str:
    """Format an amount with an explicit sign ("+12.00", "-3.50"; zero is unsigned)."""
    amount = Decimal(str(value))
    formatted = format_amount(abs(amount), decimals)
    if amount == 0:
        return formatted
    return f"-{formatted}" if amount < 0 else f"+{formatted}"
