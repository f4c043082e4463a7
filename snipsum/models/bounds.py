"""Geometry primitives shared by the projection engine and the document model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A point; the coordinate space is decided by the caller."""

    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle.

    Coordinate system:
    - Origin (0, 0) is top-left corner
    - X increases rightward
    - Y increases downward

    Region bounds are always stored in source space (native frame pixels).
    The same type describes the viewport rectangle in display space.

    Attributes:
        x: X-coordinate (left edge)
        y: Y-coordinate (top edge)
        width: Rectangle width
        height: Rectangle height
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        """Validate dimensions are non-negative."""
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Bounds dimensions must be non-negative: "
                f"width={self.width}, height={self.height}"
            )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}
