from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Optional


class RequestStatus(str, Enum):
    """Lifecycle of a punch request.

    PENDING is set by the submission path; everything else is owned by the worker.
    """

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (RequestStatus.COMPLETED, RequestStatus.FAILED)


class ClockStatus(IntEnum):
    """Punch kind as stored on a record (0..3)."""

    CLOCK_IN = 0
    CLOCK_OUT = 1
    BREAK_START = 2
    BREAK_END = 3

    @classmethod
    def parse(cls, value: Any) -> Optional["ClockStatus"]:
        """Return the member for a raw stored value, or None when it is not one of the four kinds."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return None
