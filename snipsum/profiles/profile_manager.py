"""Active capture profile.

The overlay reads its minimum rectangle size, amount formatting reads its
decimals and create_recognizer reads the OCR and mock settings from whichever
profile is active here. Components read it when they are built, so switching
profiles affects overlays and recognizers created afterwards.
"""

import logging
from typing import Optional, Union

from .profile_loader import CaptureProfile, get_default_profile, load_profile

logger = logging.getLogger(__name__)

_active_profile: Optional[CaptureProfile] = None


def set_profile(profile: Union[str, CaptureProfile] = "default") -> CaptureProfile:
    """Make a capture profile active.

    Args:
        profile: Profile name under configs/profiles, or an already built
            CaptureProfile (e.g. from CaptureProfile.from_dict)

    Returns:
        The active CaptureProfile

    Raises:
        FileNotFoundError: If a named profile doesn't exist
        ValueError: If a named profile is invalid
    """
    global _active_profile
    if isinstance(profile, CaptureProfile):
        _active_profile = profile
    else:
        _active_profile = load_profile(profile)
    logger.info(
        f"Active capture profile: {_active_profile.name} "
        f"(min_rect_size={_active_profile.min_rect_size}, "
        f"amount_decimals={_active_profile.amount_decimals})"
    )
    return _active_profile


def get_profile() -> CaptureProfile:
    """Active capture profile; the bundled default is loaded on first use."""
    global _active_profile
    if _active_profile is None:
        _active_profile = get_default_profile()
    return _active_profile


def reset_profile():
    """Drop the active profile so the next get_profile() reloads the default."""
    global _active_profile
    _active_profile = None
