from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from ..shifts.model import Shift
from .model import Request


class RequestRepository(Protocol):
    # Worker side
    def has_pending(self) -> bool:
        raise NotImplementedError

    def list_pending(self) -> Sequence[Request]:
        """Pending requests in id order, with records, employees and location loaded."""

        raise NotImplementedError

    def claim(self, request_ids: Sequence[int]) -> int:
        """Move the given Pending requests to Processing in one write. Returns rows changed."""

        raise NotImplementedError

    def release(self, request_ids: Sequence[int]) -> int:
        """Processing -> Pending for claimed requests that were never started. Returns rows changed."""

        raise NotImplementedError

    def mark_failed(self, *, request_id: int, fail_message: str) -> bool:
        raise NotImplementedError

    def complete(self, *, request_id: int, created: Sequence[Shift], updated: Sequence[Shift]) -> bool:
        """Insert `created`, update breaks of `updated` and set Completed, all in one transaction."""

        raise NotImplementedError

    # Operator side
    def get_by_id(self, request_id: int) -> Optional[Request]:
        raise NotImplementedError

    def list_by_status(self, *, status: Optional[RequestStatus] = None, limit: int = 200) -> Sequence[Request]:
        """Requests without records, newest first."""

        raise NotImplementedError

    def requeue(self, request_id: int) -> bool:
        """Processing -> Pending, for requests orphaned by a crashed iteration."""

        raise NotImplementedError
