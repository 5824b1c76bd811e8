from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Location:
    location_id: int
    code: str
    name: str


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    location: Location


@dataclass(frozen=True)
class Employment:
    """Time-bounded assignment of an employee to a department and role.

    Note: Maintained by the HR administration app; read-only here.
    """

    employment_id: int
    employee_id: int
    department: Department
    role_id: int
    start_date: date
    end_date: Optional[date] = None
    is_deleted: bool = False

    @property
    def department_id(self) -> int:
        return self.department.department_id

    @property
    def location_code(self) -> str:
        return self.department.location.code

    def is_in_location(self, location_code: str) -> bool:
        return not self.is_deleted and self.location_code == location_code

    def is_active_on(self, location_code: str, on: date) -> bool:
        """Not deleted, in the location, and `on` falls within [start_date, end_date]."""
        if not self.is_in_location(location_code):
            return False
        if self.start_date > on:
            return False
        return self.end_date is None or self.end_date >= on


@dataclass(frozen=True)
class Employee:
    employee_id: int
    code: str
    full_name: str = ""
    employments: tuple[Employment, ...] = field(default_factory=tuple)

    def has_active_employment(self, location_code: str, on: date) -> bool:
        return any(e.is_active_on(location_code, on) for e in self.employments)

    def employments_in(self, location_code: str) -> list[Employment]:
        """Non-deleted employments in a location, regardless of dates."""
        return [e for e in self.employments if e.is_in_location(location_code)]
