"""Token data model representing one recognized numeric fragment."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class CaptureToken:
    """One recognized text fragment inside a region.

    The magnitude and the sign are stored separately so a user can flip the
    sign without re-parsing the text.

    Attributes:
        id: Token identifier
        text: Raw recognized text
        normalized_value: Non-negative magnitude, None when the text is not numeric
        is_negative: Inferred (or user-corrected) sign
        confidence: Recognition confidence 0–100 for the whole job; None if unknown
        corrected_by_user: True once a human has overridden value or sign
    """

    id: str
    text: str
    normalized_value: Optional[Decimal] = None
    is_negative: bool = False
    confidence: Optional[float] = None
    corrected_by_user: bool = False

    def __post_init__(self):
        """Validate the stored magnitude is non-negative."""
        if self.normalized_value is not None and not self.normalized_value.is_nan():
            if self.normalized_value < 0:
                raise ValueError(
                    f"Token magnitude must be non-negative, got {self.normalized_value}"
                )

    @property
    def signed_value(self) -> Optional[Decimal]:
        """Magnitude with the sign applied, None for non-numeric tokens."""
        if self.normalized_value is None or self.normalized_value.is_nan():
            return None
        return -self.normalized_value if self.is_negative else self.normalized_value
