"""Central configuration for Snip & Sum."""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

RECOGNIZER_BACKENDS = ("tesseract", "mock")


def get_app_name() -> str:
    """Get application name."""
    return "Snip & Sum"


def get_app_version() -> str:
    """Get application version from pyproject.toml."""
    try:
        import tomli
        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomli.load(f)
            return pyproject.get("project", {}).get("version", "0.1.0")
    except Exception:
        # Installed without the source tree
        return "0.1.0"


def get_log_level() -> str:
    """Get log level name.

    Returns:
        Level from SNIPSUM_LOG_LEVEL (default: "INFO"); invalid names fall back to "INFO"
    """
    level = os.getenv("SNIPSUM_LOG_LEVEL", "INFO").upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        logger.warning(f"Invalid log level: {level}, using 'INFO'")
        return "INFO"
    return level


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for a host application.

    Args:
        level: Level name; defaults to get_log_level()
    """
    logging.basicConfig(
        level=getattr(logging, (level or get_log_level()).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_ocr_language() -> Optional[str]:
    """Get Tesseract language code.

    Returns:
        Language from SNIPSUM_OCR_LANG, or None to let the active profile decide
    """
    return os.getenv("SNIPSUM_OCR_LANG", "").strip() or None


def get_recognizer_backend() -> str:
    """Get recognizer backend name.

    Returns:
        "tesseract" or "mock" from SNIPSUM_RECOGNIZER, default "tesseract"
    """
    backend = os.getenv("SNIPSUM_RECOGNIZER", "tesseract").strip().lower()
    if backend not in RECOGNIZER_BACKENDS:
        logger.warning(f"Invalid recognizer backend: {backend}, using 'tesseract'")
        return "tesseract"
    return backend


def get_poll_interval() -> float:
    """Get scheduler poll interval in seconds (SNIPSUM_POLL_INTERVAL, default 0.25)."""
    env_value = os.getenv("SNIPSUM_POLL_INTERVAL")
    if not env_value:
        return 0.25
    try:
        interval = float(env_value)
    except ValueError:
        logger.warning(f"Invalid poll interval: {env_value!r}, using 0.25")
        return 0.25
    return interval if interval > 0 else 0.25


def get_job_timeout() -> Optional[float]:
    """Get optional per-job recognition timeout in seconds.

    Returns:
        Timeout from SNIPSUM_JOB_TIMEOUT, or None (no timeout) if unset or invalid
    """
    env_value = os.getenv("SNIPSUM_JOB_TIMEOUT")
    if not env_value:
        return None
    try:
        timeout = float(env_value)
    except ValueError:
        logger.warning(f"Invalid job timeout: {env_value!r}, ignoring")
        return None
    return timeout if timeout > 0 else None
