from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import ClockStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..requests.model import Record, Request
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)

# Punch kinds that may still be written onto a shift stored by an earlier run.
_BREAK_KINDS = (ClockStatus.BREAK_START, ClockStatus.BREAK_END)

ShiftKey = tuple[str, date]


@dataclass
class ReconciliationResult:
    created: list[Shift] = field(default_factory=list)
    updated: list[Shift] = field(default_factory=list)

    @property
    def touched(self) -> int:
        return len(self.created) + len(self.updated)


class ShiftReconciler:
    """Fold the records of one request into shifts.

    Lookup order per record: shift already stored for (employee code, request date),
    then a shift created earlier in this run, otherwise a new shift. Nothing is
    written here; the caller persists `created` and `updated` together with the
    request status.
    """

    def __init__(self, shifts: ShiftRepository, employees: EmployeeRepository):
        self._shifts = shifts
        self._employees = employees

    def reconcile(self, req: Request) -> ReconciliationResult:
        result = ReconciliationResult()
        stored: dict[ShiftKey, Optional[Shift]] = {}
        in_run: dict[ShiftKey, Shift] = {}

        for rec in req.records:
            status = rec.clock_status
            if status is None:
                raise ValidationError(f"Record {rec.record_id} has invalid clock status {rec.raw_clock_status}")

            key = (rec.employee_code, req.request_date)
            if key not in stored:
                stored[key] = self._shifts.find_started_on(rec.employee_code, req.request_date)

            existing = stored[key]
            if existing is not None:
                # Start/end of a stored shift are already anchored.
                if status in _BREAK_KINDS and existing.fill(status, rec.clock_value):
                    if existing not in result.updated:
                        result.updated.append(existing)
                continue

            shift = in_run.get(key)
            if shift is not None:
                if not shift.fill(status, rec.clock_value):
                    logger.debug("Request %s: duplicate %s for %s dropped", req.request_id, status.name, rec.employee_code)
                continue

            shift = self._new_shift(req, rec, status)
            in_run[key] = shift
            result.created.append(shift)

        return result

    def _resolve_employee(self, rec: Record) -> Employee:
        employee = rec.employee or self._employees.get_by_code(rec.employee_code)
        if employee is None:
            raise NotFoundError(f"Employee {rec.employee_code} not found")
        return employee

    def _new_shift(self, req: Request, rec: Record, status: ClockStatus) -> Shift:
        employee = self._resolve_employee(rec)
        shift = Shift(employee_id=employee.employee_id, employee_code=employee.code)

        candidates = employee.employments_in(req.location_code)
        if len(candidates) == 1:
            shift.department_id = candidates[0].department_id
            shift.role_id = candidates[0].role_id
        else:
            logger.info(
                "Request %s: %d employments for %s in %s, department/role left empty",
                req.request_id,
                len(candidates),
                employee.code,
                req.location_code,
            )

        shift.fill(status, rec.clock_value)
        return shift
