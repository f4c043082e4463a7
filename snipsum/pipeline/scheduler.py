"""Recognition scheduling for pending regions.

Every pending region gets exactly one in-flight recognition job. In-flight
regions are tracked explicitly, not by status alone, because other callers
may reset a region's status while its job is still running.

All document mutations happen on the event loop thread; the only suspension
points are dispatching a job and awaiting its result. Results are applied in
completion order.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from ..models.document import CaptureDocument
from ..models.region import CaptureRegion, RegionStatus
from .number_normalizer import tokens_from_text
from .ocr_abstraction import RecognitionError, RecognitionResult, Recognizer

logger = logging.getLogger(__name__)

ImageProvider = Callable[[CaptureRegion], Any]


class RecognitionScheduler:
    """Dispatch recognition jobs for pending regions and apply their results.

    Failure policy: a failed job (engine error, timeout, unusable or blank
    result) moves the region to RegionStatus.ERROR with its previous tokens
    untouched. There is no automatic retry; setting the status back to
    pending re-queues the region on the next scan.

    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        document: CaptureDocument,
        recognizer: Recognizer,
        image_provider: Optional[ImageProvider] = None,
        job_timeout: Optional[float] = None,
    ):
        """Initialize scheduler.

        Args:
            document: Document whose pending regions are recognized
            recognizer: Recognition engine (the scheduler is its only caller)
            image_provider: Returns the image for a region, typically the
                current frame cropped with crop_to_bounds(); None passes no image
            job_timeout: Optional per-job timeout in seconds
        """
        self.document = document
        self.recognizer = recognizer
        self.image_provider = image_provider
        self.job_timeout = job_timeout
        self._in_flight: Dict[str, asyncio.Task] = {}
        self._closed = False

    @property
    def in_flight(self) -> Set[str]:
        return set(self._in_flight)

    @property
    def closed(self) -> bool:
        return self._closed

    def scan(self) -> List[str]:
        """Dispatch a job for every pending region that has none in flight.

        Returns:
            Ids of regions dispatched by this scan
        """
        if self._closed:
            return []
        dispatched = []
        for region in self.document.pending_regions():
            if region.id in self._in_flight:
                continue
            if self._dispatch(region):
                dispatched.append(region.id)
        return dispatched

    def _dispatch(self, region: CaptureRegion) -> bool:
        try:
            image = self.image_provider(region) if self.image_provider is not None else None
        except Exception as e:
            logger.warning(f"Could not get image for region {region.id}: {e}")
            self.document.set_region_status(region.id, RegionStatus.ERROR)
            return False

        # Status flips before the first suspension point so no other scan sees it pending.
        self.document.set_region_status(region.id, RegionStatus.PROCESSING)
        task = asyncio.get_running_loop().create_task(self._run_job(region.id, image))
        self._in_flight[region.id] = task
        logger.debug(f"Dispatched recognition for region {region.id}")
        return True

    async def _recognize(self, image: Any) -> RecognitionResult:
        if self.job_timeout is not None:
            try:
                return await asyncio.wait_for(self.recognizer.recognize(image), self.job_timeout)
            except asyncio.TimeoutError as e:
                raise RecognitionError(f"Recognition timed out after {self.job_timeout}s") from e
        return await self.recognizer.recognize(image)

    async def _run_job(self, region_id: str, image: Any) -> None:
        task = asyncio.current_task()
        try:
            try:
                result = await self._recognize(image)
                if not isinstance(result, RecognitionResult):
                    raise RecognitionError(f"Unusable recognition result: {type(result).__name__}")
                tokens = tokens_from_text(result.text, result.confidence)
                if not tokens:
                    raise RecognitionError("Recognition returned no text")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if self._is_current(region_id, task):
                    logger.warning(f"Recognition failed for region {region_id}: {e}")
                    self.document.set_region_status(region_id, RegionStatus.ERROR)
                return

            if not self._is_current(region_id, task):
                logger.debug(f"Discarding stale recognition result for region {region_id}")
                return
            self.document.update_region_tokens(region_id, tokens)
            logger.info(f"Recognized {len(tokens)} token(s) for region {region_id}")
        finally:
            if self._in_flight.get(region_id) is task:
                del self._in_flight[region_id]

    def _is_current(self, region_id: str, task: Optional[asyncio.Task]) -> bool:
        return not self._closed and self._in_flight.get(region_id) is task

    async def drain(self) -> None:
        """Wait until no job is in flight."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight.values()), return_exceptions=True)

    async def run(self, poll_interval: float = 0.25) -> None:
        """Scan for pending regions until the scheduler is closed."""
        while not self._closed:
            self.scan()
            await asyncio.sleep(poll_interval)

    def close(self) -> None:
        """Cancel all outstanding jobs and forget them.

        Results that arrive afterwards are discarded, never applied.
        """
        self._closed = True
        tasks = list(self._in_flight.values())
        self._in_flight.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info(f"Cancelled {len(tasks)} recognition job(s)")

    async def aclose(self) -> None:
        """Close, wait for cancelled jobs to unwind and release the recognizer."""
        tasks = list(self._in_flight.values())
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self.recognizer.close()
