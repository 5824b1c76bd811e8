from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError
from ..requests.model import Request
from ..requests.repository import RequestRepository
from ..shifts.reconciler import ShiftReconciler
from .validation import validate_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestOutcome:
    request_id: int
    status: RequestStatus
    fail_message: Optional[str] = None
    shifts_created: int = 0
    shifts_updated: int = 0


@dataclass
class CycleReport:
    claimed: int = 0
    outcomes: list[RequestOutcome] = field(default_factory=list)

    @property
    def completed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == RequestStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == RequestStatus.FAILED)


class RequestProcessingService:
    """Moves requests Pending -> Processing -> Completed | Failed.

    Precondition: one worker instance per database. `claim_pending` reads the
    Pending set and then updates it; a second instance would race on that gap.
    """

    def __init__(
        self,
        requests: RequestRepository,
        reconciler: ShiftReconciler,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._reconciler = reconciler
        self._clock = clock

    def has_pending(self) -> bool:
        return self._requests.has_pending()

    def claim_pending(self) -> list[Request]:
        requests = list(self._requests.list_pending())
        if not requests:
            return []
        claimed = self._requests.claim([r.request_id for r in requests])
        logger.info("Claimed %d pending request(s)", claimed)
        return [replace(r, status=RequestStatus.PROCESSING) for r in requests]

    def process(self, req: Request) -> RequestOutcome:
        """Validate and reconcile one claimed request, then persist its terminal state.

        Infrastructure errors propagate; the request then stays Processing.
        """
        today = self._clock().date()

        validation = validate_request(req, today=today)
        if validation.failed:
            message = validation.fail_message
            if not self._requests.mark_failed(request_id=req.request_id, fail_message=message):
                raise InvalidTransitionError(f"Request {req.request_id} is no longer Processing")
            logger.warning("Request %s failed validation: %s", req.request_id, message)
            return RequestOutcome(req.request_id, RequestStatus.FAILED, fail_message=message)

        result = self._reconciler.reconcile(req)
        self._requests.complete(request_id=req.request_id, created=result.created, updated=result.updated)
        logger.info(
            "Request %s completed: %d shift(s) created, %d updated",
            req.request_id,
            len(result.created),
            len(result.updated),
        )
        return RequestOutcome(
            req.request_id,
            RequestStatus.COMPLETED,
            shifts_created=len(result.created),
            shifts_updated=len(result.updated),
        )

    def process_pending(self) -> CycleReport:
        """One claim-and-process cycle over every Pending request, sequentially in id order.

        If a request raises, it stays Processing and the claimed requests after it
        are released back to Pending before the error propagates.
        """
        claimed = self.claim_pending()
        report = CycleReport(claimed=len(claimed))
        for i, req in enumerate(claimed):
            try:
                report.outcomes.append(self.process(req))
            except Exception:
                self._release([r.request_id for r in claimed[i + 1:]])
                raise
        return report

    def _release(self, request_ids: list[int]) -> None:
        if not request_ids:
            return
        released = self._requests.release(request_ids)
        logger.warning("Released %d unstarted request(s) back to Pending: %s", released, request_ids)

    # Operator actions
    def requeue(self, request_id: int) -> None:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PROCESSING:
            raise InvalidTransitionError(f"Only Processing requests can be requeued (status is {req.status.value})")
        if not self._requests.requeue(req.request_id):
            raise InvalidTransitionError("Request changed status while being requeued")
        logger.info("Request %s requeued to Pending", req.request_id)

    def get_request(self, request_id: int) -> Request:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        return req

    def list_requests(self, *, status: Optional[RequestStatus] = None, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Request]:
        return self._requests.list_by_status(status=status, limit=limit)
