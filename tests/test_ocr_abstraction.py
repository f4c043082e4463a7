"""Unit tests for the recognition abstraction layer."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image
from pydantic import ValidationError

from snipsum.models.bounds import Bounds
from snipsum.pipeline.mock_recognizer import MockRecognizer
from snipsum.pipeline.ocr_abstraction import (
    RecognitionError,
    RecognitionResult,
    TesseractRecognizer,
    create_recognizer,
    crop_to_bounds,
)
from snipsum.profiles.profile_loader import CaptureProfile


@pytest.fixture
def fake_pytesseract():
    with patch("snipsum.pipeline.ocr_abstraction.pytesseract") as mocked:
        yield mocked


class TestRecognitionResult:
    def test_defaults(self):
        result = RecognitionResult()
        assert result.text == ""
        assert result.confidence is None

    @pytest.mark.parametrize("confidence", [-1.0, 100.5])
    def test_confidence_range(self, confidence):
        with pytest.raises(ValidationError):
            RecognitionResult(text="1", confidence=confidence)


class TestCropToBounds:
    def test_crop_rounds_to_pixels(self):
        frame = Image.new("RGB", (100, 50))
        crop = crop_to_bounds(frame, Bounds(10.4, 5.6, 20, 10))
        assert crop.size == (20, 10)

    def test_crop_is_clamped_to_frame(self):
        frame = Image.new("RGB", (100, 50))
        crop = crop_to_bounds(frame, Bounds(90, 40, 50, 50))
        assert crop.size == (10, 10)

    def test_crop_outside_frame_is_none(self):
        frame = Image.new("RGB", (100, 50))
        assert crop_to_bounds(frame, Bounds(200, 200, 10, 10)) is None
        assert crop_to_bounds(None, Bounds(0, 0, 10, 10)) is None


class TestTesseractRecognizer:
    def test_words_and_mean_confidence(self, fake_pytesseract):
        fake_pytesseract.image_to_data.return_value = {
            "text": ["", "12.50", "(3.00)", " ", "x"],
            "conf": [-1, 90, "80", -1, "bad"],
        }
        recognizer = TesseractRecognizer(lang="eng", psm=6)
        result = asyncio.run(recognizer.recognize(Image.new("RGB", (10, 10))))
        assert result.text == "12.50 (3.00)"
        assert result.confidence == pytest.approx(85.0)
        kwargs = fake_pytesseract.image_to_data.call_args.kwargs
        assert kwargs["lang"] == "eng"
        assert kwargs["config"] == "--psm 6"

    def test_no_words_has_no_confidence(self, fake_pytesseract):
        fake_pytesseract.image_to_data.return_value = {"text": [""], "conf": [-1]}
        result = asyncio.run(TesseractRecognizer().recognize(object()))
        assert result.text == ""
        assert result.confidence is None

    def test_engine_error_is_wrapped(self, fake_pytesseract):
        fake_pytesseract.image_to_data.side_effect = RuntimeError("tesseract not found")
        with pytest.raises(RecognitionError, match="tesseract not found"):
            asyncio.run(TesseractRecognizer().recognize(object()))

    def test_requires_pytesseract(self):
        with patch("snipsum.pipeline.ocr_abstraction.pytesseract", None):
            with pytest.raises(ImportError, match="pytesseract"):
                TesseractRecognizer()


class TestCreateRecognizer:
    def test_mock_backend_uses_profile(self):
        profile = CaptureProfile(name="t", mock={"min_delay": 0.0, "max_delay": 0.1, "negative_ratio": 1.0})
        recognizer = create_recognizer("mock", profile)
        assert isinstance(recognizer, MockRecognizer)
        assert recognizer.max_delay == 0.1
        assert recognizer.negative_ratio == 1.0

    def test_tesseract_backend_env_language(self, fake_pytesseract, monkeypatch):
        monkeypatch.setenv("SNIPSUM_OCR_LANG", "swe")
        recognizer = create_recognizer("tesseract", CaptureProfile(name="t", ocr={"lang": "eng", "psm": 4}))
        assert isinstance(recognizer, TesseractRecognizer)
        assert recognizer.lang == "swe"
        assert recognizer.psm == 4

    def test_tesseract_backend_profile_language(self, fake_pytesseract, monkeypatch):
        monkeypatch.delenv("SNIPSUM_OCR_LANG", raising=False)
        recognizer = create_recognizer("tesseract", CaptureProfile(name="t", ocr={"lang": "deu"}))
        assert recognizer.lang == "deu"
        assert recognizer.psm == 6

    def test_backend_from_environment(self, monkeypatch):
        monkeypatch.setenv("SNIPSUM_RECOGNIZER", "mock")
        assert isinstance(create_recognizer(profile=CaptureProfile(name="t")), MockRecognizer)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_recognizer("paddle", CaptureProfile(name="t"))


class TestMockRecognizer:
    def test_produces_amounts(self):
        recognizer = MockRecognizer(min_delay=0, max_delay=0, negative_ratio=1.0, seed=11)
        result = asyncio.run(recognizer.recognize(None))
        fragments = result.text.split()
        assert 2 <= len(fragments) <= 4
        assert all(f.startswith("(") and f.endswith(")") for f in fragments)
        assert 75 <= result.confidence <= 98

    def test_seed_is_deterministic(self):
        first = asyncio.run(MockRecognizer(0, 0, seed=5).recognize(None))
        second = asyncio.run(MockRecognizer(0, 0, seed=5).recognize(None))
        assert first == second

    def test_invalid_delay_range(self):
        with pytest.raises(ValueError):
            MockRecognizer(min_delay=1.0, max_delay=0.5)
