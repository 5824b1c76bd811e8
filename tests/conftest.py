from __future__ import annotations

from datetime import date, datetime

import pytest

from src.shift_creator.shift_creator.core.enums import ClockStatus, RequestStatus
from src.shift_creator.shift_creator.employees.model import Department, Employee, Employment, Location
from src.shift_creator.shift_creator.requests.model import Record, Request

TODAY = date(2026, 2, 1)
L1 = Location(location_id=1, code="L1", name="Downtown")
L2 = Location(location_id=2, code="L2", name="Airport")
KITCHEN_L1 = Department(department_id=10, name="Kitchen", location=L1)
BAR_L1 = Department(department_id=11, name="Bar", location=L1)
KITCHEN_L2 = Department(department_id=20, name="Kitchen", location=L2)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 18, 0, 0)


def at(hour: int, minute: int = 0, day: date = TODAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def employment(
    employee_id: int,
    *,
    department: Department = KITCHEN_L1,
    role_id: int = 1,
    start: date = date(2025, 1, 1),
    end: date | None = None,
    deleted: bool = False,
    employment_id: int | None = None,
) -> Employment:
    return Employment(
        employment_id=employment_id or employee_id * 100 + department.department_id,
        employee_id=employee_id,
        department=department,
        role_id=role_id,
        start_date=start,
        end_date=end,
        is_deleted=deleted,
    )


def employee(employee_id: int, code: str, *employments: Employment) -> Employee:
    return Employee(employee_id=employee_id, code=code, full_name=f"Employee {code}", employments=tuple(employments))


def make_request(
    *records: tuple,
    request_id: int = 1,
    location: Location = L1,
    request_date: date = TODAY,
    employees: dict[str, Employee] | None = None,
    status: RequestStatus = RequestStatus.PROCESSING,
) -> Request:
    """Build a request from (employee_code, clock_status, clock_value) tuples."""
    employees = employees or {}
    recs = tuple(
        Record(
            record_id=i + 1,
            request_id=request_id,
            employee_code=code,
            raw_clock_status=int(kind),
            clock_value=value,
            employee=employees.get(code),
        )
        for i, (code, kind, value) in enumerate(records)
    )
    return Request(
        request_id=request_id,
        location_code=location.code,
        request_date=request_date,
        status=status,
        records=recs,
        location=location,
    )


IN, OUT, BREAK_START, BREAK_END = (
    ClockStatus.CLOCK_IN,
    ClockStatus.CLOCK_OUT,
    ClockStatus.BREAK_START,
    ClockStatus.BREAK_END,
)
