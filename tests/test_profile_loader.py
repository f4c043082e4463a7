"""Unit tests for profile loader."""

from decimal import Decimal

import pytest
import yaml
from unittest.mock import patch

from snipsum.profiles.profile_loader import (
    CaptureProfile,
    load_profile,
    list_available_profiles,
    get_default_profile,
    get_profiles_dir,
)
from snipsum.profiles.profile_manager import set_profile, get_profile, reset_profile
from snipsum.utils.formatting import format_amount


@pytest.fixture(autouse=True)
def _reset_profile():
    reset_profile()
    yield
    reset_profile()


class TestCaptureProfile:
    """Test CaptureProfile dataclass."""

    def test_profile_defaults(self):
        config = CaptureProfile(name="test")

        assert config.min_rect_size == 10.0
        assert config.ocr == {"lang": "eng", "psm": 6}
        assert config.mock["negative_ratio"] == 0.3
        assert config.amount_decimals == 2

    def test_profile_from_dict_merges_sections(self):
        data = {
            "name": "test",
            "description": "Test",
            "min_rect_size": 4,
            "ocr": {"lang": "swe"},
        }

        config = CaptureProfile.from_dict(data)

        assert config.name == "test"
        assert config.min_rect_size == 4.0
        assert config.ocr == {"lang": "swe", "psm": 6}
        assert config.mock["min_delay"] == 0.6

    def test_profile_to_dict(self):
        config = CaptureProfile(name="test", description="Test", amount_decimals=3)

        data = config.to_dict()

        assert data["name"] == "test"
        assert data["description"] == "Test"
        assert data["amount_decimals"] == 3
        assert CaptureProfile.from_dict(data) == config

    def test_default_sections_are_not_shared(self):
        first = CaptureProfile(name="a")
        first.ocr["lang"] = "fin"
        assert CaptureProfile(name="b").ocr["lang"] == "eng"


class TestLoadProfile:
    """Test profile loading."""

    def test_load_profile(self, tmp_path):
        profiles_dir = tmp_path / "profiles"
        profiles_dir.mkdir()
        (profiles_dir / "default.yaml").write_text(
            yaml.dump({"name": "default", "description": "Default profile", "min_rect_size": 12}),
            encoding='utf-8'
        )

        with patch('snipsum.profiles.profile_loader.get_profiles_dir', return_value=profiles_dir):
            profile = load_profile("default")

        assert profile.name == "default"
        assert profile.min_rect_size == 12.0

    def test_load_profile_not_found(self, tmp_path):
        with patch('snipsum.profiles.profile_loader.get_profiles_dir', return_value=tmp_path):
            with pytest.raises(FileNotFoundError):
                load_profile("nonexistent")

    @pytest.mark.parametrize("content", ["invalid: yaml: content: [", "", "- a\n- b\n"])
    def test_load_profile_invalid(self, tmp_path, content):
        (tmp_path / "invalid.yaml").write_text(content, encoding='utf-8')

        with patch('snipsum.profiles.profile_loader.get_profiles_dir', return_value=tmp_path):
            with pytest.raises(ValueError):
                load_profile("invalid")

    def test_bundled_default_profile(self):
        assert (get_profiles_dir() / "default.yaml").exists()
        profile = get_default_profile()
        assert profile.name == "default"
        assert profile.min_rect_size == 10.0

    def test_default_profile_fallback(self, tmp_path):
        with patch('snipsum.profiles.profile_loader.get_profiles_dir', return_value=tmp_path):
            profile = get_default_profile()
        assert profile.name == "default"
        assert profile.ocr["lang"] == "eng"


class TestProfileManager:
    """Test profile manager."""

    def test_set_and_get_profile(self, tmp_path):
        (tmp_path / "test.yaml").write_text(yaml.dump({"name": "test"}), encoding='utf-8')

        with patch('snipsum.profiles.profile_loader.get_profiles_dir', return_value=tmp_path):
            profile = set_profile("test")

        assert profile.name == "test"
        assert get_profile().name == "test"

    def test_get_default_profile(self):
        assert get_profile().name == "default"

    def test_set_built_profile_drives_formatting(self):
        profile = CaptureProfile.from_dict({"name": "cents_off", "amount_decimals": 0})
        assert set_profile(profile) is profile
        assert get_profile() is profile
        assert format_amount(Decimal("1234.5")) == "1,235"

    def test_reset_restores_default(self):
        set_profile(CaptureProfile.from_dict({"name": "wide", "min_rect_size": 40}))
        reset_profile()
        assert get_profile().name == "default"
        assert get_profile().min_rect_size == 10


def test_list_available_profiles(tmp_path):
    (tmp_path / "default.yaml").write_text("name: default", encoding='utf-8')
    (tmp_path / "custom.yaml").write_text("name: custom", encoding='utf-8')

    with patch('snipsum.profiles.profile_loader.get_profiles_dir', return_value=tmp_path):
        assert list_available_profiles() == ["custom", "default"]


def test_list_available_profiles_missing_dir(tmp_path):
    with patch('snipsum.profiles.profile_loader.get_profiles_dir', return_value=tmp_path / "none"):
        assert list_available_profiles() == ["default"]
