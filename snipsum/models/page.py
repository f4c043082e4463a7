"""Page data model representing one logical capture sheet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class CapturePage:
    """Represents one page of captured work.

    Attributes:
        id: Page identifier
        index: Display index (starts at 1)
        label: User-editable label
        region_ids: Owned region ids in capture order
        created_at: Creation time (epoch milliseconds)
        updated_at: Last update time (epoch milliseconds)
    """

    id: str
    index: int
    label: str
    region_ids: List[str] = field(default_factory=list)
    created_at: int = 0
    updated_at: int = 0

    def __post_init__(self):
        """Validate index is positive."""
        if self.index < 1:
            raise ValueError(f"Page index must be >= 1, got {self.index}")
