"""Profile loader for configurable capture behavior."""

import yaml
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass, field

DEFAULT_OCR = {"lang": "eng", "psm": 6}
DEFAULT_MOCK = {"min_delay": 0.6, "max_delay": 1.4, "negative_ratio": 0.3}


@dataclass
class CaptureProfile:
    """Configuration profile for capture behavior."""
    name: str
    description: str = ""
    min_rect_size: float = 10.0  # source pixels, both axes
    ocr: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_OCR))
    mock: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_MOCK))
    amount_decimals: int = 2

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CaptureProfile':
        """Create CaptureProfile from dictionary; missing sections use defaults."""
        return cls(
            name=data.get('name', 'default'),
            description=data.get('description', ''),
            min_rect_size=float(data.get('min_rect_size', 10.0)),
            ocr={**DEFAULT_OCR, **(data.get('ocr') or {})},
            mock={**DEFAULT_MOCK, **(data.get('mock') or {})},
            amount_decimals=int(data.get('amount_decimals', 2)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'description': self.description,
            'min_rect_size': self.min_rect_size,
            'ocr': self.ocr,
            'mock': self.mock,
            'amount_decimals': self.amount_decimals,
        }


def get_profiles_dir() -> Path:
    """Get directory containing profile YAML files.

    Returns:
        Path to configs/profiles relative to project root
    """
    # snipsum/profiles/profile_loader.py -> snipsum/profiles -> snipsum -> root
    project_root = Path(__file__).resolve().parent.parent.parent
    return project_root / "configs" / "profiles"


def load_profile(profile_name: str = "default") -> CaptureProfile:
    """Load a capture profile.

    Args:
        profile_name: Name of profile to load (without .yaml extension)

    Returns:
        CaptureProfile object

    Raises:
        FileNotFoundError: If profile file doesn't exist
        ValueError: If profile file is invalid
    """
    profile_path = get_profiles_dir() / f"{profile_name}.yaml"

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_name} (expected at {profile_path})")

    try:
        with open(profile_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in profile {profile_name}: {e}") from e

    if not data:
        raise ValueError(f"Profile file is empty: {profile_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Profile {profile_name} must be a mapping, got {type(data).__name__}")

    try:
        return CaptureProfile.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error loading profile {profile_name}: {e}") from e


def list_available_profiles() -> list[str]:
    """List all available profile names (without .yaml extension)."""
    profiles_dir = get_profiles_dir()

    if not profiles_dir.exists():
        return ["default"]

    profiles = [profile_file.stem for profile_file in profiles_dir.glob("*.yaml")]
    return sorted(profiles) if profiles else ["default"]


def get_default_profile() -> CaptureProfile:
    """Get default profile (always available)."""
    try:
        return load_profile("default")
    except FileNotFoundError:
        return CaptureProfile(name="default", description="Default configuration")
