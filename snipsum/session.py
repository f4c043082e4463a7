"""Capture session state machine (idle -> capturing -> reviewing)."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .models.document import CaptureDocument

logger = logging.getLogger(__name__)


class OverlayMode(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    REVIEWING = "reviewing"


TransitionListener = Callable[[OverlayMode, OverlayMode], None]


class CaptureSession:
    """Long-lived capture lifecycle for one document.

    Transitions:
        begin_capture:  idle/reviewing/capturing -> capturing (selection cleared, banner shown)
        finish_capture: capturing -> reviewing (selection kept)
        cancel_capture: any -> idle (selection cleared)

    There is no terminal state. Only `capturing` allows drawing; the
    drawing surface checks `can_draw` itself.
    """

    def __init__(
        self,
        document: CaptureDocument,
        on_transition: Optional[TransitionListener] = None,
    ):
        self.document = document
        self.on_transition = on_transition
        self._mode = OverlayMode.IDLE
        self.banner_visible = True

    @property
    def mode(self) -> OverlayMode:
        return self._mode

    @property
    def can_draw(self) -> bool:
        return self._mode == OverlayMode.CAPTURING

    def _set_mode(self, mode: OverlayMode) -> None:
        previous = self._mode
        self._mode = mode
        logger.debug(f"Capture session {previous.value} -> {mode.value}")
        if self.on_transition is not None:
            self.on_transition(previous, mode)

    def begin_capture(self) -> None:
        self.document.reset_selection()
        self.banner_visible = True
        self._set_mode(OverlayMode.CAPTURING)

    def finish_capture(self) -> None:
        if self._mode != OverlayMode.CAPTURING:
            logger.debug(f"finish_capture ignored in mode {self._mode.value}")
            return
        self._set_mode(OverlayMode.REVIEWING)

    def cancel_capture(self) -> None:
        self.document.reset_selection()
        self._set_mode(OverlayMode.IDLE)

    def toggle_banner(self, next_state: Optional[bool] = None) -> bool:
        """Flip banner visibility, or set it when next_state is given.

        Returns:
            New visibility
        """
        self.banner_visible = (not self.banner_visible) if next_state is None else bool(next_state)
        return self.banner_visible
