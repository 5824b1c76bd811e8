from __future__ import annotations

from datetime import date
from typing import Optional

import pytest
from conftest import BAR_L1, BREAK_END, BREAK_START, IN, KITCHEN_L2, OUT, TODAY, at, employee, employment, make_request

from src.shift_creator.shift_creator.core.exceptions import NotFoundError, ValidationError
from src.shift_creator.shift_creator.employees.model import Employee
from src.shift_creator.shift_creator.shifts.model import Shift
from src.shift_creator.shift_creator.shifts.reconciler import ShiftReconciler


class InMemoryShifts:
    def __init__(self, *shifts: Shift):
        self._shifts = list(shifts)
        self.lookups: list[tuple[str, date]] = []

    def find_started_on(self, employee_code: str, work_date: date) -> Optional[Shift]:
        self.lookups.append((employee_code, work_date))
        for s in self._shifts:
            if s.employee_code == employee_code and s.work_date == work_date:
                return s
        return None


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._by_code = {e.code: e for e in employees}

    def get_by_code(self, code: str) -> Optional[Employee]:
        return self._by_code.get(code)


E1 = employee(1, "E1", employment(1, role_id=3))
E2 = employee(2, "E2", employment(2, role_id=4))


def _reconciler(*stored: Shift, employees=(E1, E2)) -> ShiftReconciler:
    return ShiftReconciler(InMemoryShifts(*stored), InMemoryEmployees(*employees))


def test_single_clock_in_creates_shift_with_department_and_role():
    req = make_request(("E1", IN, at(9)), employees={"E1": E1})

    result = _reconciler().reconcile(req)

    assert result.updated == []
    assert len(result.created) == 1
    shift = result.created[0]
    assert shift.employee_id == 1
    assert shift.start == at(9)
    assert shift.department_id == 10
    assert shift.role_id == 3
    assert shift.end is None and shift.break_start is None and shift.break_end is None


def test_repeated_clock_in_keeps_first_value():
    req = make_request(("E1", IN, at(9)), ("E1", IN, at(9, 5)), employees={"E1": E1})

    result = _reconciler().reconcile(req)

    assert len(result.created) == 1
    assert result.created[0].start == at(9)


def test_clock_in_and_out_merge_into_one_shift():
    req = make_request(("E1", IN, at(9)), ("E1", OUT, at(17)), employees={"E1": E1})

    result = _reconciler().reconcile(req)

    assert len(result.created) == 1
    assert result.created[0].start == at(9)
    assert result.created[0].end == at(17)


def test_full_day_fills_all_four_fields():
    req = make_request(
        ("E1", IN, at(9)),
        ("E1", BREAK_START, at(12)),
        ("E1", BREAK_END, at(12, 30)),
        ("E1", OUT, at(17)),
        employees={"E1": E1},
    )

    shift = _reconciler().reconcile(req).created[0]

    assert (shift.start, shift.break_start, shift.break_end, shift.end) == (at(9), at(12), at(12, 30), at(17))


def test_clock_out_before_clock_in_is_not_reordered():
    req = make_request(("E1", OUT, at(17)), ("E1", IN, at(9)), employees={"E1": E1})

    shift = _reconciler().reconcile(req).created[0]

    assert shift.end == at(17)
    assert shift.start == at(9)


def test_one_shift_per_distinct_employee():
    req = make_request(
        ("E1", IN, at(9)),
        ("E2", IN, at(10)),
        ("E1", OUT, at(17)),
        ("E2", OUT, at(18)),
        employees={"E1": E1, "E2": E2},
    )

    result = _reconciler().reconcile(req)

    assert [s.employee_code for s in result.created] == ["E1", "E2"]
    assert [s.end for s in result.created] == [at(17), at(18)]


def test_stored_shift_only_takes_break_fields():
    stored = Shift(shift_id=50, employee_id=1, employee_code="E1", start=at(9))
    req = make_request(
        ("E1", BREAK_START, at(12)),
        ("E1", IN, at(9, 30)),
        ("E1", OUT, at(17)),
        ("E1", BREAK_START, at(13)),
        employees={"E1": E1},
    )

    result = _reconciler(stored).reconcile(req)

    assert result.created == []
    assert result.updated == [stored]
    assert stored.break_start == at(12)
    assert stored.start == at(9)
    assert stored.end is None


def test_stored_shift_with_break_already_set_is_not_reported_as_updated():
    stored = Shift(shift_id=50, employee_id=1, employee_code="E1", start=at(9), break_start=at(11))
    req = make_request(("E1", BREAK_START, at(12)), employees={"E1": E1})

    result = _reconciler(stored).reconcile(req)

    assert result.touched == 0
    assert stored.break_start == at(11)


def test_stored_lookup_happens_once_per_employee():
    shifts = InMemoryShifts()
    reconciler = ShiftReconciler(shifts, InMemoryEmployees(E1))
    req = make_request(("E1", IN, at(9)), ("E1", BREAK_START, at(12)), ("E1", OUT, at(17)), employees={"E1": E1})

    reconciler.reconcile(req)

    assert shifts.lookups == [("E1", TODAY)]


@pytest.mark.parametrize(
    "employments",
    [
        (),
        (employment(1, department=KITCHEN_L2),),
        (employment(1), employment(1, department=BAR_L1)),
    ],
    ids=["none", "other-location", "ambiguous"],
)
def test_department_and_role_left_empty_unless_exactly_one_employment(employments):
    e1 = employee(1, "E1", *employments)
    req = make_request(("E1", IN, at(9)), employees={"E1": e1})

    shift = _reconciler(employees=(e1,)).reconcile(req).created[0]

    assert shift.department_id is None
    assert shift.role_id is None
    assert shift.start == at(9)


def test_employment_match_ignores_dates_but_not_deletion():
    expired = employment(1, start=date(2020, 1, 1), end=date(2020, 12, 31), role_id=9)
    deleted = employment(1, department=BAR_L1, deleted=True)
    e1 = employee(1, "E1", expired, deleted)
    req = make_request(("E1", IN, at(9)), employees={"E1": e1})

    shift = _reconciler(employees=(e1,)).reconcile(req).created[0]

    assert shift.department_id == 10
    assert shift.role_id == 9


def test_employee_not_loaded_on_record_is_resolved_from_repository():
    req = make_request(("E2", BREAK_END, at(15)))

    shift = _reconciler().reconcile(req).created[0]

    assert shift.employee_id == 2
    assert shift.break_end == at(15)


def test_unknown_employee_raises():
    req = make_request(("NOPE", IN, at(9)))

    with pytest.raises(NotFoundError):
        _reconciler().reconcile(req)


def test_invalid_clock_status_is_rejected():
    req = make_request(("E1", IN, at(9)), ("E1", 7, at(10)))

    with pytest.raises(ValidationError):
        _reconciler().reconcile(req)
