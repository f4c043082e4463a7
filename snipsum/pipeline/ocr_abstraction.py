"""Recognition abstraction layer with Tesseract implementation.

The scheduler is the only caller of a Recognizer. A recognizer accepts an
image of one region and returns the recognized text plus one confidence for
the whole job.
"""

import asyncio
import logging
import statistics
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

try:
    import pytesseract
    from PIL import Image
except ImportError:
    pytesseract = None
    Image = None

from ..config import get_ocr_language, get_recognizer_backend
from ..models.bounds import Bounds
from ..profiles.profile_loader import CaptureProfile
from ..profiles.profile_manager import get_profile

logger = logging.getLogger(__name__)

# Common install location on Windows; used when Tesseract is not on PATH
TESSERACT_DEFAULT_WIN_PATH = Path(r"C:\Program Files\Tesseract-OCR\tesseract.exe")


def _apply_tesseract_default_path() -> None:
    """Point tesseract_cmd at the default Windows install if that file exists."""
    if sys.platform != "win32" or pytesseract is None:
        return
    if TESSERACT_DEFAULT_WIN_PATH.is_file():
        pytesseract.pytesseract.tesseract_cmd = str(TESSERACT_DEFAULT_WIN_PATH)


class RecognitionError(Exception):
    """Raised when a recognition job fails."""
    pass


class RecognitionResult(BaseModel):
    """Result of one recognition job.

    Confidence uses the 0–100 scale (Tesseract native) and is reported once
    per job, not per word.
    """

    text: str = ""
    confidence: Optional[float] = Field(None, ge=0.0, le=100.0)


class Recognizer(ABC):
    """Abstract base class for recognition engines."""

    @abstractmethod
    async def recognize(self, image: Any) -> RecognitionResult:
        """Recognize text in a region image.

        Args:
            image: Region image (Pillow Image for the bundled engines)

        Returns:
            RecognitionResult with text and confidence

        Raises:
            RecognitionError: If recognition fails
        """
        pass

    async def close(self) -> None:
        """Release engine resources. Default: nothing to release."""
        return None


class TesseractRecognizer(Recognizer):
    """Tesseract recognizer implementation.

    Uses the pytesseract wrapper. Word confidences from image_to_data are
    averaged into one job confidence. The blocking Tesseract call runs in a
    worker thread so the event loop keeps serving other regions.
    """

    def __init__(self, lang: str = "eng", psm: int = 6):
        """Initialize Tesseract recognizer.

        Args:
            lang: Language code (default: 'eng')
            psm: Tesseract page segmentation mode (default: 6, uniform block of text)
        """
        if pytesseract is None:
            raise ImportError(
                "pytesseract is required for OCR. "
                "Install with: pip install pytesseract pillow. "
                "Also ensure Tesseract OCR is installed on the system."
            )

        if Image is None:
            raise ImportError(
                "Pillow (PIL) is required for image handling. "
                "Install with: pip install pillow"
            )

        self.lang = lang
        self.psm = psm
        _apply_tesseract_default_path()

    def _recognize_sync(self, image: Any) -> RecognitionResult:
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.lang,
                output_type=pytesseract.Output.DICT,
                config=f"--psm {self.psm}",
            )
        except Exception as e:
            raise RecognitionError(f"Tesseract recognition failed: {str(e)}") from e

        words = []
        confidences = []
        for text, conf in zip(data.get("text", []), data.get("conf", [])):
            text = (text or "").strip()
            try:
                conf = float(conf)
            except (TypeError, ValueError):
                continue
            # Layout rows report conf == -1; only word rows carry 0–100.
            if conf < 0 or not text:
                continue
            words.append(text)
            confidences.append(conf)

        confidence = statistics.mean(confidences) if confidences else None
        return RecognitionResult(text=" ".join(words), confidence=confidence)

    async def recognize(self, image: Any) -> RecognitionResult:
        return await asyncio.to_thread(self._recognize_sync, image)


def crop_to_bounds(frame: Any, bounds: Bounds) -> Optional[Any]:
    """Crop a Pillow frame to source-space bounds.

    Bounds are rounded to whole pixels and clamped to the frame.

    Returns:
        Cropped image, or None if nothing of the bounds lies inside the frame
    """
    if frame is None:
        return None
    frame_width, frame_height = frame.size
    left = max(0, int(round(bounds.x)))
    top = max(0, int(round(bounds.y)))
    right = min(frame_width, int(round(bounds.right)))
    bottom = min(frame_height, int(round(bounds.bottom)))
    if right <= left or bottom <= top:
        return None
    return frame.crop((left, top, right, bottom))


def create_recognizer(
    backend: Optional[str] = None,
    profile: Optional[CaptureProfile] = None,
) -> Recognizer:
    """Build the configured recognizer.

    Args:
        backend: "tesseract" or "mock" (default: get_recognizer_backend())
        profile: Capture profile (default: active profile)

    Returns:
        Recognizer instance
    """
    backend = backend or get_recognizer_backend()
    profile = profile or get_profile()
    if backend == "mock":
        from .mock_recognizer import MockRecognizer
        return MockRecognizer.from_profile(profile)
    if backend != "tesseract":
        raise ValueError(f"Unknown recognizer backend: {backend} (must be 'tesseract' or 'mock')")
    lang = get_ocr_language() or profile.ocr.get("lang", "eng")
    psm = int(profile.ocr.get("psm", 6))
    logger.info(f"Using Tesseract recognizer (lang={lang}, psm={psm})")
    return TesseractRecognizer(lang=lang, psm=psm)
