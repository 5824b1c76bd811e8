from __future__ import annotations

from datetime import date, timedelta

from conftest import BREAK_START, IN, KITCHEN_L2, L1, OUT, TODAY, at, employee, employment, make_request

from src.shift_creator.shift_creator.core import constants
from src.shift_creator.shift_creator.processing.validation import validate_request

E1 = employee(1, "E1", employment(1))


def test_valid_request_passes():
    req = make_request(("E1", IN, at(9)), ("E1", OUT, at(17)), employees={"E1": E1})

    result = validate_request(req, today=TODAY)

    assert not result.failed
    assert result.fail_message == ""


def test_request_dated_after_today_fails():
    tomorrow = TODAY + timedelta(days=1)
    req = make_request(request_date=tomorrow)

    result = validate_request(req, today=TODAY)

    assert result.failed
    assert result.fail_message == constants.DATE_IS_LATER_THAN_TODAY


def test_employee_without_employment_in_location_fails_with_code_and_location_name():
    e1 = employee(1, "E1", employment(1, department=KITCHEN_L2))
    req = make_request(("E1", IN, at(9)), employees={"E1": e1})

    result = validate_request(req, today=TODAY)

    assert result.failed
    assert "E1" in result.fail_message
    assert L1.name in result.fail_message


def test_unknown_employee_is_reported_as_missing_employment():
    req = make_request(("GHOST", IN, at(9)))

    result = validate_request(req, today=TODAY)

    assert result.messages == [
        constants.EMPLOYEE_HAS_NO_EMPLOYMENT_IN_LOCATION.format(code="GHOST", location=L1.name)
    ]


def test_employment_outside_request_date_is_not_active():
    ended = employee(1, "E1", employment(1, end=TODAY - timedelta(days=1)))
    future = employee(2, "E2", employment(2, start=TODAY + timedelta(days=1)))
    deleted = employee(3, "E3", employment(3, deleted=True))
    req = make_request(
        ("E1", IN, at(9)),
        ("E2", IN, at(9)),
        ("E3", IN, at(9)),
        employees={"E1": ended, "E2": future, "E3": deleted},
    )

    result = validate_request(req, today=TODAY)

    assert len(result.messages) == 3


def test_employment_ending_on_request_date_is_active():
    e1 = employee(1, "E1", employment(1, start=TODAY, end=TODAY))
    req = make_request(("E1", IN, at(9)), employees={"E1": e1})

    assert not validate_request(req, today=TODAY).failed


def test_invalid_clock_status_fails_with_raw_value():
    req = make_request(("E1", 7, at(9)), employees={"E1": E1})

    result = validate_request(req, today=TODAY)

    assert result.messages == [constants.CLOCK_STATUS_NOT_VALID.format(code="E1", value=7)]


def test_clock_value_after_today_fails():
    req = make_request(("E1", BREAK_START, at(12, day=TODAY + timedelta(days=1))), employees={"E1": E1})

    result = validate_request(req, today=TODAY)

    assert result.messages == [constants.CLOCK_VALUE_NOT_VALID.format(code="E1")]


def test_all_failures_are_collected_and_concatenated_without_separator():
    req = make_request(
        ("E1", -1, at(9)),
        ("E2", IN, at(9, day=date(2026, 2, 5))),
        request_date=date(2026, 2, 2),
        employees={"E1": E1},
    )

    result = validate_request(req, today=TODAY)

    # E1's employment is open-ended, so only its clock status fails.
    expected = [
        constants.DATE_IS_LATER_THAN_TODAY,
        constants.CLOCK_STATUS_NOT_VALID.format(code="E1", value=-1),
        constants.EMPLOYEE_HAS_NO_EMPLOYMENT_IN_LOCATION.format(code="E2", location=L1.name),
        constants.CLOCK_VALUE_NOT_VALID.format(code="E2"),
    ]
    assert result.messages == expected
    assert result.fail_message == "".join(expected)
