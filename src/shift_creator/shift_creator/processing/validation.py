from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..common.datetime_utils import as_date
from ..core import constants
from ..requests.model import Record, Request


@dataclass
class ValidationResult:
    """Collected failures of one request, in the order they were found."""

    messages: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.messages)

    @property
    def fail_message(self) -> str:
        # Messages are joined with no separator.
        return "".join(self.messages)

    def add(self, message: str) -> None:
        self.messages.append(message)


def check_request_date(req: Request, *, today: date) -> list[str]:
    if req.request_date > today:
        return [constants.DATE_IS_LATER_THAN_TODAY]
    return []


def check_record(req: Request, rec: Record, *, today: date) -> list[str]:
    """All rule violations of one record. An unknown employee counts as having no employment."""
    out: list[str] = []

    employee = rec.employee
    if employee is None or not employee.has_active_employment(req.location_code, req.request_date):
        out.append(
            constants.EMPLOYEE_HAS_NO_EMPLOYMENT_IN_LOCATION.format(code=rec.employee_code, location=req.location_name)
        )

    if rec.clock_status is None:
        out.append(constants.CLOCK_STATUS_NOT_VALID.format(code=rec.employee_code, value=rec.raw_clock_status))

    if as_date(rec.clock_value) > today:
        out.append(constants.CLOCK_VALUE_NOT_VALID.format(code=rec.employee_code))

    return out


def validate_request(req: Request, *, today: date) -> ValidationResult:
    """Run every rule over the request and all of its records; nothing short-circuits."""
    result = ValidationResult()
    for message in check_request_date(req, today=today):
        result.add(message)
    for rec in req.records:
        for message in check_record(req, rec, today=today):
            result.add(message)
    return result
