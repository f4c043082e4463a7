"""Normalization of recognized text fragments into signed numeric tokens."""

from decimal import Decimal, InvalidOperation
import logging
import re
from typing import List, Optional

from ..models.token import CaptureToken
from ..utils.ids import create_id

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_PARENTHESIZED = re.compile(r"\(.*\)")
_WHITESPACE = re.compile(r"\s+")


def parse_magnitude(text: str) -> Optional[Decimal]:
    """Parse the numeric magnitude of a fragment.

    Keeps only digits, '.' and '-' and parses the remainder as Decimal.
    Returns the absolute value, or None when nothing parseable remains
    (e.g. "abc", "1.2.3", "--").
    """
    cleaned = _NON_NUMERIC.sub("", text)
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return abs(value)


def infer_negative(text: str) -> bool:
    """Accounting-style sign inference: "(12.00)" or "-12.00" are negative."""
    return bool(_PARENTHESIZED.search(text)) or text.strip().startswith("-")


def normalize_fragment(text: str, confidence: Optional[float] = None) -> CaptureToken:
    """Convert one raw recognized fragment into a token.

    Parse failures are not errors: the token keeps its text so a user can
    correct it, and its None magnitude contributes nothing to sums.

    Args:
        text: Raw fragment as recognized
        confidence: Recognition confidence for the job, if reported

    Returns:
        CaptureToken with magnitude, inferred sign and confidence
    """
    magnitude = parse_magnitude(text)
    if magnitude is None:
        logger.debug(f"Fragment {text!r} has no numeric value")
    return CaptureToken(
        id=create_id("token"),
        text=text,
        normalized_value=magnitude,
        is_negative=infer_negative(text),
        confidence=confidence,
        corrected_by_user=False,
    )


def split_fragments(text: Optional[str]) -> List[str]:
    """Split recognized text into word-like fragments on whitespace."""
    if not text:
        return []
    return [part for part in _WHITESPACE.split(text.strip()) if part]


def tokens_from_text(text: Optional[str], confidence: Optional[float] = None) -> List[CaptureToken]:
    """Build tokens for every fragment of a recognition result.

    The recognizer reports one confidence per job, so it is attached to
    every token uniformly.
    """
    return [normalize_fragment(fragment, confidence) for fragment in split_fragments(text)]


def correct_token(
    token: CaptureToken,
    value: Optional[Decimal] = None,
    is_negative: Optional[bool] = None,
) -> CaptureToken:
    """Apply a human override to a token in place.

    A negative override value is stored as its magnitude with the sign flag
    set, unless is_negative is given explicitly. Once corrected, the sign is
    never re-inferred from text.

    Args:
        token: Token to correct
        value: New value (sign may be included)
        is_negative: New sign flag

    Returns:
        The same token, marked corrected_by_user
    """
    if value is not None:
        value = Decimal(str(value))
        if not value.is_finite():
            raise ValueError(f"Corrected value must be finite, got {value}")
        token.normalized_value = abs(value)
        if is_negative is None:
            is_negative = value < 0
    if is_negative is not None:
        token.is_negative = is_negative
    token.corrected_by_user = True
    return token
