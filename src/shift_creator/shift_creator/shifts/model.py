from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ClockStatus

_FIELD_BY_STATUS = {
    ClockStatus.CLOCK_IN: "start",
    ClockStatus.CLOCK_OUT: "end",
    ClockStatus.BREAK_START: "break_start",
    ClockStatus.BREAK_END: "break_end",
}


@dataclass
class Shift:
    """Reconciled attendance of one employee for one day.

    Each timestamp is written at most once: `fill` never overwrites a value.
    `shift_id` is None until the shift has been inserted.
    """

    employee_id: int
    employee_code: str
    shift_id: Optional[int] = None
    department_id: Optional[int] = None
    role_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None

    @property
    def work_date(self) -> Optional[date]:
        return self.start.date() if self.start else None

    def fill(self, status: ClockStatus, value: datetime) -> bool:
        """Set the field for `status` if it is still empty. Returns True when a value was written."""
        name = _FIELD_BY_STATUS[status]
        if getattr(self, name) is not None:
            return False
        setattr(self, name, value)
        return True
