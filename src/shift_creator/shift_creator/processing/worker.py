from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.constants import DEFAULT_POLL_INTERVAL_SECONDS
from .service import CycleReport, RequestProcessingService

logger = logging.getLogger(__name__)


class ShiftWorker:
    """Poll loop driving RequestProcessingService.

    Runs one claim-and-process cycle per iteration when Pending requests exist,
    then waits `interval` seconds. The stop event is honoured during the wait and
    at the top of each iteration, never in the middle of a cycle.

    Only one worker may run against a database at a time.
    """

    def __init__(
        self,
        service: RequestProcessingService,
        *,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        stop_event: Optional[threading.Event] = None,
    ):
        self._service = service
        self._interval = float(interval)
        self._stop = stop_event or threading.Event()

    @property
    def stop_event(self) -> threading.Event:
        return self._stop

    def stop(self) -> None:
        self._stop.set()

    def run_once(self) -> Optional[CycleReport]:
        """One iteration. Errors are logged and swallowed so the loop retries on the next poll."""
        try:
            if not self._service.has_pending():
                logger.debug("No pending requests")
                return None
            report = self._service.process_pending()
        except Exception:
            # The in-flight request stays Processing; unstarted claims were already released.
            logger.exception("Poll iteration abandoned")
            return None

        logger.info(
            "Cycle done: %d claimed, %d completed, %d failed",
            report.claimed,
            report.completed,
            report.failed,
        )
        return report

    def run(self, *, max_iterations: Optional[int] = None) -> int:
        """Loop until stopped. Returns the number of iterations run."""
        logger.info("Shift worker started (interval=%ss)", self._interval)
        iterations = 0
        while not self._stop.is_set():
            self.run_once()
            iterations += 1
            if max_iterations is not None and iterations >= max_iterations:
                break
            self._stop.wait(self._interval)
        logger.info("Shift worker stopped after %d iteration(s)", iterations)
        return iterations
