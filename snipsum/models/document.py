"""Capture document: owns pages, regions and the transient selection."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
import logging
import time
from typing import Dict, List, Optional, Sequence

from ..pipeline.aggregator import region_sum
from ..pipeline.number_normalizer import correct_token
from ..utils.ids import create_id
from .bounds import Bounds
from .page import CapturePage
from .region import CaptureRegion, RegionStatus
from .token import CaptureToken

logger = logging.getLogger(__name__)


class StructuralError(Exception):
    """Raised when a mutation would break the page/region ownership structure."""
    pass


def _now_ms() -> int:
    return int(time.time() * 1000)


def _page_snapshot(page: CapturePage) -> CapturePage:
    return replace(page, region_ids=list(page.region_ids))


def _region_snapshot(region: CaptureRegion) -> CaptureRegion:
    return replace(region, tokens=[replace(token) for token in region.tokens])


@dataclass
class Selection:
    """Transient set of selected region ids (token ids reserved for later use)."""

    region_ids: List[str] = field(default_factory=list)
    token_ids: List[str] = field(default_factory=list)

    def copy(self) -> Selection:
        return Selection(list(self.region_ids), list(self.token_ids))


class CaptureDocument:
    """State of one capture session.

    The document is the only writer of its entities. Reads hand out copies,
    so pages and regions only change through the mutation methods. Every
    mutation is a single synchronous step; derived totals are recomputed on
    each read so they are never stale. Unknown ids are soft no-ops because
    they may legitimately race against removal. The only hard failure is
    staging a region against a page that does not exist.

    A document always has at least one page.
    """

    def __init__(self, first_page_label: Optional[str] = None):
        self._pages: Dict[str, CapturePage] = {}
        self._regions: Dict[str, CaptureRegion] = {}
        self._page_order: List[str] = []
        self._selection = Selection()
        self._active_page_id = ""
        self.add_page(first_page_label)

    # -- reads -------------------------------------------------------------

    @property
    def pages(self) -> List[CapturePage]:
        """Pages in page order."""
        return [_page_snapshot(self._pages[page_id]) for page_id in self._page_order]

    @property
    def page_order(self) -> List[str]:
        return list(self._page_order)

    @property
    def regions(self) -> Dict[str, CaptureRegion]:
        return {region_id: _region_snapshot(r) for region_id, r in self._regions.items()}

    @property
    def active_page_id(self) -> str:
        return self._active_page_id

    @property
    def active_page(self) -> CapturePage:
        return _page_snapshot(self._pages[self._active_page_id])

    @property
    def selection(self) -> Selection:
        """Snapshot of the current selection."""
        return self._selection.copy()

    def get_page(self, page_id: str) -> Optional[CapturePage]:
        page = self._pages.get(page_id)
        return _page_snapshot(page) if page is not None else None

    def get_region(self, region_id: str) -> Optional[CaptureRegion]:
        region = self._regions.get(region_id)
        return _region_snapshot(region) if region is not None else None

    def page_regions(self, page_id: str) -> List[CaptureRegion]:
        """Regions of a page in capture order (empty for unknown page)."""
        page = self._pages.get(page_id)
        if page is None:
            return []
        regions = (self._regions.get(region_id) for region_id in page.region_ids)
        return [_region_snapshot(r) for r in regions if r is not None]

    def pending_regions(self) -> List[CaptureRegion]:
        return [
            _region_snapshot(r) for r in self._regions.values() if r.status == RegionStatus.PENDING
        ]

    def is_selected(self, region_id: str) -> bool:
        return region_id in self._selection.region_ids

    def page_position(self, page_id: str) -> Optional[int]:
        """0-based position of a page in page order, None if unknown."""
        try:
            return self._page_order.index(page_id)
        except ValueError:
            return None

    def next_page_id(self) -> Optional[str]:
        position = self.page_position(self._active_page_id)
        if position is None or position >= len(self._page_order) - 1:
            return None
        return self._page_order[position + 1]

    def previous_page_id(self) -> Optional[str]:
        position = self.page_position(self._active_page_id)
        if not position:
            return None
        return self._page_order[position - 1]

    # -- derived totals ----------------------------------------------------

    def page_total(self, page_id: str) -> Decimal:
        """Sum of region sums on a page; 0 for an unknown page."""
        total = Decimal("0")
        for region in self.page_regions(page_id):
            total += region.sum
        return total

    def grand_total(self) -> Decimal:
        """Sum of page totals over all pages in page order."""
        total = Decimal("0")
        for page_id in self._page_order:
            total += self.page_total(page_id)
        return total

    def selection_total(self) -> Decimal:
        """Sum of region sums over selected regions."""
        total = Decimal("0")
        for region_id in self._selection.region_ids:
            region = self._regions.get(region_id)
            if region is not None:
                total += region.sum
        return total

    # -- page mutations ----------------------------------------------------

    def add_page(self, label: Optional[str] = None) -> str:
        """Append a new page and make it active.

        Args:
            label: Optional label (default "Page {index}")

        Returns:
            Id of the new page
        """
        index = len(self._page_order) + 1
        timestamp = _now_ms()
        page = CapturePage(
            id=create_id("page"),
            index=index,
            label=label if label is not None else f"Page {index}",
            region_ids=[],
            created_at=timestamp,
            updated_at=timestamp,
        )
        self._pages[page.id] = page
        self._page_order.append(page.id)
        self._active_page_id = page.id
        logger.debug(f"Added page {page.id} ({page.label})")
        return page.id

    def go_to_page(self, page_id: str) -> None:
        """Switch the active page; unknown ids are ignored. Selection is kept."""
        if page_id not in self._pages:
            logger.debug(f"go_to_page ignored, unknown page {page_id}")
            return
        self._active_page_id = page_id

    def rename_page(self, page_id: str, label: str) -> None:
        page = self._pages.get(page_id)
        if page is None or page.label == label:
            return
        page.label = label
        page.updated_at = _now_ms()

    # -- region mutations --------------------------------------------------

    def stage_region(self, bounds: Bounds, page_id: Optional[str] = None) -> CaptureRegion:
        """Create a pending region at the end of a page's region list.

        Args:
            bounds: Rectangle in source space
            page_id: Owning page (default: active page)

        Returns:
            Copy of the new CaptureRegion (status pending)

        Raises:
            StructuralError: If the target page does not exist
        """
        target_page_id = page_id if page_id is not None else self._active_page_id
        page = self._pages.get(target_page_id)
        if page is None:
            logger.error(f"Cannot stage region: page {target_page_id!r} does not exist")
            raise StructuralError(
                f"Unable to stage region without a valid page: {target_page_id!r}"
            )
        timestamp = _now_ms()
        region = CaptureRegion(
            id=create_id("region"),
            page_id=target_page_id,
            bounds=bounds,
            status=RegionStatus.PENDING,
            tokens=[],
            sum=Decimal("0"),
            created_at=timestamp,
            updated_at=timestamp,
        )
        self._regions[region.id] = region
        page.region_ids.append(region.id)
        page.updated_at = timestamp
        logger.debug(f"Staged region {region.id} on page {target_page_id}")
        return _region_snapshot(region)

    def update_region_tokens(self, region_id: str, tokens: Sequence[CaptureToken]) -> None:
        """Replace a region's tokens wholesale, recompute its sum, mark it complete.

        This is the only path into RegionStatus.COMPLETE.
        """
        region = self._regions.get(region_id)
        if region is None:
            logger.debug(f"update_region_tokens ignored, unknown region {region_id}")
            return
        region.tokens = list(tokens)
        region.sum = region_sum(region.tokens)
        region.status = RegionStatus.COMPLETE
        region.updated_at = _now_ms()

    def set_region_status(self, region_id: str, status: RegionStatus) -> None:
        """Move a region to pending, processing or error.

        Completion is ignored here; it only comes with tokens from
        update_region_tokens.
        """
        status = RegionStatus(status)
        if status == RegionStatus.COMPLETE:
            logger.debug(f"set_region_status ignored, {region_id} cannot be completed without tokens")
            return
        region = self._regions.get(region_id)
        if region is None or region.status == status:
            return
        region.status = status
        region.updated_at = _now_ms()

    def correct_token(
        self,
        region_id: str,
        token_id: str,
        value: Optional[Decimal] = None,
        is_negative: Optional[bool] = None,
    ) -> None:
        """Apply a user override to one token and recompute the region sum in full."""
        region = self._regions.get(region_id)
        if region is None:
            return
        token = next((t for t in region.tokens if t.id == token_id), None)
        if token is None:
            return
        correct_token(token, value=value, is_negative=is_negative)
        region.sum = region_sum(region.tokens)
        region.updated_at = _now_ms()

    def remove_region(self, region_id: str) -> None:
        """Delete a region, detaching it from its page and from the selection."""
        region = self._regions.pop(region_id, None)
        if region is None:
            logger.debug(f"remove_region ignored, unknown region {region_id}")
            return
        page = self._pages.get(region.page_id)
        if page is not None:
            page.region_ids = [rid for rid in page.region_ids if rid != region_id]
            page.updated_at = _now_ms()
        token_prefix = f"{region_id}:"
        self._selection = Selection(
            region_ids=[rid for rid in self._selection.region_ids if rid != region_id],
            token_ids=[tid for tid in self._selection.token_ids if not tid.startswith(token_prefix)],
        )
        logger.debug(f"Removed region {region_id}")

    def undo_last_region(self, page_id: Optional[str] = None) -> Optional[str]:
        """Remove the most recently captured region of a page (active page by default).

        Returns:
            Id of the removed region, or None if the page has no regions
        """
        page = self._pages.get(page_id if page_id is not None else self._active_page_id)
        if page is None or not page.region_ids:
            return None
        last_region_id = page.region_ids[-1]
        self.remove_region(last_region_id)
        return last_region_id

    # -- selection ---------------------------------------------------------

    def toggle_region_selection(self, region_id: str) -> None:
        if region_id in self._selection.region_ids:
            self._selection.region_ids = [
                rid for rid in self._selection.region_ids if rid != region_id
            ]
        elif region_id in self._regions:
            self._selection.region_ids = self._selection.region_ids + [region_id]

    def reset_selection(self) -> None:
        self._selection = Selection()
