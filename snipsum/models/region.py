"""Region data model representing one user-drawn rectangle and its recognition result."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List

from .bounds import Bounds
from .token import CaptureToken


class RegionStatus(str, Enum):
    """Recognition lifecycle of a region."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class CaptureRegion:
    """Represents a captured rectangle on a page.

    Attributes:
        id: Region identifier
        page_id: Owning page id (back-reference; the page owns the region)
        bounds: Rectangle in source space
        status: Recognition status
        tokens: Tokens from the latest finished recognition pass
        sum: Signed aggregate of tokens
        created_at: Creation time (epoch milliseconds)
        updated_at: Last update time (epoch milliseconds)
    """

    id: str
    page_id: str
    bounds: Bounds
    status: RegionStatus = RegionStatus.PENDING
    tokens: List[CaptureToken] = field(default_factory=list)
    sum: Decimal = Decimal("0")
    created_at: int = 0
    updated_at: int = 0

    @property
    def is_in_flight(self) -> bool:
        return self.status in (RegionStatus.PENDING, RegionStatus.PROCESSING)
