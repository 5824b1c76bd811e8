from __future__ import annotations

from datetime import datetime

import pytest

from config import get_settings_module
from src.shift_creator.shift_creator.core.enums import ClockStatus, RequestStatus
from src.shift_creator.shift_creator.shifts.model import Shift


@pytest.mark.parametrize(
    "raw,expected",
    [(0, ClockStatus.CLOCK_IN), (3, ClockStatus.BREAK_END), ("2", ClockStatus.BREAK_START), (4, None), (-1, None), (None, None), (True, None)],
)
def test_clock_status_parse(raw, expected):
    assert ClockStatus.parse(raw) is expected


def test_terminal_statuses():
    assert {s for s in RequestStatus if s.is_terminal} == {RequestStatus.COMPLETED, RequestStatus.FAILED}


def test_shift_fill_is_first_write_wins():
    shift = Shift(employee_id=1, employee_code="E1")

    assert shift.fill(ClockStatus.CLOCK_OUT, datetime(2026, 2, 1, 17))
    assert not shift.fill(ClockStatus.CLOCK_OUT, datetime(2026, 2, 1, 18))
    assert shift.end == datetime(2026, 2, 1, 17)
    assert shift.work_date is None


@pytest.mark.parametrize(
    "env,module",
    [("production", "config.production"), ("prod", "config.production"), ("TEST", "config.testing"), ("anything", "config.development")],
)
def test_settings_module_selection(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == module
