"""Region aggregation: reduce a token list to a signed sum."""

from decimal import Decimal
from typing import Iterable

from ..models.token import CaptureToken


def region_sum(tokens: Iterable[CaptureToken]) -> Decimal:
    """Sum tokens using signed-magnitude semantics.

    Rules:
    - Tokens with no magnitude (None or NaN) are skipped
    - Negative tokens subtract their magnitude, all others add it
    - Always recomputed from the full list; never patched incrementally

    Args:
        tokens: Tokens of one region

    Returns:
        Signed Decimal sum (Decimal("0") for an empty or all-noise list)
    """
    total = Decimal("0")
    for token in tokens:
        value = token.normalized_value
        if value is None or value.is_nan():
            continue
        magnitude = abs(value)
        total += -magnitude if token.is_negative else magnitude
    return total
