"""Mock recognizer producing plausible amounts after a random delay."""

import asyncio
import logging
import random
from decimal import Decimal
from typing import Any, Optional

from ..profiles.profile_loader import CaptureProfile
from .ocr_abstraction import RecognitionResult, Recognizer

logger = logging.getLogger(__name__)


class MockRecognizer(Recognizer):
    """Stand-in recognizer for demos and tests.

    Ignores the image and returns two to four amounts between 25 and 750,
    some of them in accounting-negative form, e.g. "125.40 (33.10) 700.00".
    """

    def __init__(
        self,
        min_delay: float = 0.6,
        max_delay: float = 1.4,
        negative_ratio: float = 0.3,
        seed: Optional[int] = None,
    ):
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(
                f"Invalid delay range: min_delay={min_delay}, max_delay={max_delay}"
            )
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.negative_ratio = negative_ratio
        self._rng = random.Random(seed)

    @classmethod
    def from_profile(cls, profile: CaptureProfile, seed: Optional[int] = None) -> 'MockRecognizer':
        return cls(
            min_delay=float(profile.mock.get("min_delay", 0.6)),
            max_delay=float(profile.mock.get("max_delay", 1.4)),
            negative_ratio=float(profile.mock.get("negative_ratio", 0.3)),
            seed=seed,
        )

    def _amount_text(self) -> str:
        value = Decimal(str(self._rng.uniform(25, 750))).quantize(Decimal("0.01"))
        if self._rng.random() < self.negative_ratio:
            return f"({value})"
        return str(value)

    async def recognize(self, image: Any) -> RecognitionResult:
        await asyncio.sleep(self._rng.uniform(self.min_delay, self.max_delay))
        count = self._rng.randint(2, 4)
        text = " ".join(self._amount_text() for _ in range(count))
        confidence = round(self._rng.uniform(75, 98), 2)
        logger.debug(f"Mock recognition produced {text!r}")
        return RecognitionResult(text=text, confidence=confidence)
