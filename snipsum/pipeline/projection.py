"""Projection between display space and source space.

Display space is the rectangle the captured frame is rendered into (viewport,
e.g. client coordinates). Source space is the native pixel grid of the frame.
Scaling is independent per axis:

    scale_x = source_width / viewport.width
    scale_y = source_height / viewport.height

No aspect-ratio correction is applied; the frame is assumed to fill the
viewport. When either the viewport or the frame size is unknown (zero), the
projection returns None: the caller should ignore or defer the interaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models.bounds import Bounds, Point


@dataclass(frozen=True)
class ProjectedPoint:
    """A pointer position in both spaces.

    Attributes:
        display: Point relative to the viewport origin
        source: Point in source pixels
    """

    display: Point
    source: Point


def _is_projectable(viewport: Bounds, source_width: float, source_height: float) -> bool:
    if viewport.width <= 0 or viewport.height <= 0:
        return False
    if not source_width or not source_height or source_width <= 0 or source_height <= 0:
        return False
    return True


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def project_pointer(
    point: Point,
    viewport: Bounds,
    source_width: float,
    source_height: float,
) -> Optional[ProjectedPoint]:
    """Project a pointer position into both display and source space.

    The point is expressed in the same coordinate system as the viewport and
    is clamped to the viewport first, so drags that leave the visible area
    stay pinned to its edge.

    Args:
        point: Pointer position (same space as viewport.x / viewport.y)
        viewport: Rectangle the frame is rendered into
        source_width: Frame width in pixels (0 while the stream is not ready)
        source_height: Frame height in pixels

    Returns:
        ProjectedPoint, or None if not yet projectable
    """
    if not _is_projectable(viewport, source_width, source_height):
        return None
    display_x = _clamp(point.x, viewport.x, viewport.right) - viewport.x
    display_y = _clamp(point.y, viewport.y, viewport.bottom) - viewport.y
    scale_x = source_width / viewport.width
    scale_y = source_height / viewport.height
    return ProjectedPoint(
        display=Point(display_x, display_y),
        source=Point(display_x * scale_x, display_y * scale_y),
    )


def to_source(
    point: Point,
    viewport: Bounds,
    source_width: float,
    source_height: float,
) -> Optional[Point]:
    """Project a display point to source space (None if not projectable)."""
    projected = project_pointer(point, viewport, source_width, source_height)
    return projected.source if projected is not None else None


def to_display(
    bounds: Bounds,
    viewport: Bounds,
    source_width: float,
    source_height: float,
) -> Optional[Bounds]:
    """Project source-space bounds to display space, relative to the viewport origin.

    Returns:
        Bounds in display space, or None if not projectable
    """
    if not _is_projectable(viewport, source_width, source_height):
        return None
    scale_x = viewport.width / source_width
    scale_y = viewport.height / source_height
    return Bounds(
        x=bounds.x * scale_x,
        y=bounds.y * scale_y,
        width=bounds.width * scale_x,
        height=bounds.height * scale_y,
    )


def to_source_bounds(
    bounds: Bounds,
    viewport: Bounds,
    source_width: float,
    source_height: float,
) -> Optional[Bounds]:
    """Project viewport-relative display bounds back to source space.

    Both corners go through the same clamped projection as pointer events.
    """
    origin = to_source(
        Point(viewport.x + bounds.x, viewport.y + bounds.y),
        viewport, source_width, source_height,
    )
    corner = to_source(
        Point(viewport.x + bounds.right, viewport.y + bounds.bottom),
        viewport, source_width, source_height,
    )
    if origin is None or corner is None:
        return None
    return bounds_from_corners(origin, corner)


def bounds_from_corners(a: Point, b: Point) -> Bounds:
    """Normalize two opposite corners (in any drag direction) into bounds."""
    return Bounds(
        x=min(a.x, b.x),
        y=min(a.y, b.y),
        width=abs(b.x - a.x),
        height=abs(b.y - a.y),
    )
