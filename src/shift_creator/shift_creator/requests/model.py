from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ClockStatus, RequestStatus
from ..employees.model import Employee, Location


@dataclass(frozen=True)
class Record:
    """One clock punch inside a request.

    `raw_clock_status` is kept as stored; `clock_status` is None when the value
    is not one of the four punch kinds.
    """

    record_id: int
    request_id: int
    employee_code: str
    raw_clock_status: int
    clock_value: datetime
    employee: Optional[Employee] = None

    @property
    def clock_status(self) -> Optional[ClockStatus]:
        return ClockStatus.parse(self.raw_clock_status)


@dataclass(frozen=True)
class Request:
    """A batch of punches for one location and calendar date."""

    request_id: int
    location_code: str
    request_date: date
    status: RequestStatus
    fail_message: Optional[str] = None
    records: tuple[Record, ...] = field(default_factory=tuple)
    location: Optional[Location] = None
    created_at: Optional[datetime] = None

    @property
    def location_name(self) -> str:
        return self.location.name if self.location else self.location_code
