"""Identifier generation for capture entities."""

import uuid
from typing import Optional


def create_id(prefix: Optional[str] = None) -> str:
    """Create a globally unique opaque identifier.

    Args:
        prefix: Optional entity prefix, e.g. "page" or "region"

    Returns:
        "{prefix}-{uuid4}" when a prefix is given, otherwise the bare uuid4 string
    """
    core = str(uuid.uuid4())
    return f"{prefix}-{core}" if prefix else core
