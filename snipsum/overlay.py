"""Capture overlay controller: turns pointer gestures into staged regions.

This is the component that owns the drawing surface. It is headless: the
rendering layer forwards pointer and key events in display coordinates and
draws whatever `draft` and `region_display_bounds()` describe.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, List, Optional, Protocol, Tuple

from .models.bounds import Bounds, Point
from .models.region import CaptureRegion
from .pipeline.projection import ProjectedPoint, bounds_from_corners, project_pointer, to_display
from .profiles.profile_manager import get_profile
from .session import CaptureSession

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0


class FrameSource(Protocol):
    """Live frame collaborator, queried synchronously on every pointer event."""

    def viewport(self) -> Bounds:
        """Rectangle the frame is rendered into, in display units."""
        ...

    def source_size(self) -> Tuple[float, float]:
        """Native frame (width, height) in pixels; (0, 0) until the stream is ready."""
        ...


@dataclass
class DraftRectangle:
    """Rectangle being dragged, tracked in both spaces."""

    origin: ProjectedPoint
    current: ProjectedPoint

    @property
    def display_bounds(self) -> Bounds:
        return bounds_from_corners(self.origin.display, self.current.display)

    @property
    def source_bounds(self) -> Bounds:
        return bounds_from_corners(self.origin.source, self.current.source)


class CaptureOverlay:
    """Drawing surface for one capture session.

    Drawing is only accepted while the session is capturing. A finished drag
    smaller than min_rect_size (source pixels) on either axis is discarded.
    """

    def __init__(
        self,
        session: CaptureSession,
        frame_source: FrameSource,
        min_rect_size: Optional[float] = None,
        on_region_staged: Optional[Callable[[CaptureRegion], None]] = None,
    ):
        self.session = session
        self.frame_source = frame_source
        self.min_rect_size = (
            min_rect_size if min_rect_size is not None else get_profile().min_rect_size
        )
        self.on_region_staged = on_region_staged
        self._draft: Optional[DraftRectangle] = None

    @property
    def document(self):
        return self.session.document

    @property
    def draft(self) -> Optional[DraftRectangle]:
        return self._draft

    def _project(self, point: Point) -> Optional[ProjectedPoint]:
        width, height = self.frame_source.source_size()
        return project_pointer(point, self.frame_source.viewport(), width, height)

    def pointer_down(self, point: Point, button: int = PRIMARY_BUTTON) -> bool:
        """Start a draft rectangle.

        Returns:
            True if a draft was started
        """
        if button != PRIMARY_BUTTON or not self.session.can_draw:
            return False
        projected = self._project(point)
        if projected is None:
            return False
        self._draft = DraftRectangle(origin=projected, current=projected)
        return True

    def pointer_move(self, point: Point) -> None:
        if self._draft is None:
            return
        projected = self._project(point)
        if projected is None:
            return
        self._draft.current = projected

    def pointer_up(self, point: Optional[Point] = None) -> Optional[CaptureRegion]:
        """Finish the draft and stage it on the active page.

        Args:
            point: Release position; the last move position is used if None

        Returns:
            The staged region, or None if there was no draft, capture
            ended meanwhile, or the rectangle was too small
        """
        draft, self._draft = self._draft, None
        if draft is None:
            return None
        if point is not None:
            projected = self._project(point)
            if projected is not None:
                draft.current = projected
        if not self.session.can_draw:
            return None

        bounds = draft.source_bounds
        if bounds.width < self.min_rect_size or bounds.height < self.min_rect_size:
            logger.debug(
                f"Discarding draft {bounds.width:.1f}x{bounds.height:.1f}, "
                f"minimum is {self.min_rect_size}"
            )
            return None

        region = self.document.stage_region(bounds, self.document.active_page_id)
        if self.on_region_staged is not None:
            self.on_region_staged(region)
        return region

    def cancel_draft(self) -> None:
        self._draft = None

    def region_display_bounds(self) -> List[Tuple[CaptureRegion, Bounds]]:
        """Active-page regions with their display bounds, in capture order.

        Regions are skipped while the frame is not projectable.
        """
        width, height = self.frame_source.source_size()
        viewport = self.frame_source.viewport()
        result = []
        for region in self.document.page_regions(self.document.active_page_id):
            display = to_display(region.bounds, viewport, width, height)
            if display is not None:
                result.append((region, display))
        return result

    def undo_last_area(self) -> Optional[str]:
        """Remove the last captured region of the active page."""
        return self.document.undo_last_region()

    def handle_key(self, key: str, shift: bool = False) -> bool:
        """Escape exits capture, Enter finishes it.

        Returns:
            True if the key was handled
        """
        if key == "Escape":
            self.cancel_draft()
            self.session.cancel_capture()
            return True
        if key == "Enter" and not shift:
            self.cancel_draft()
            self.session.finish_capture()
            return True
        return False
