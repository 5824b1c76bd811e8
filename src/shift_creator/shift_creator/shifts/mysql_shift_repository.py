from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence

from ..core.exceptions import DataIntegrityError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Shift
from .repository import ShiftRepository

_SHIFT_COLUMNS = """
    s.shift_id, s.employee_id, e.code AS employee_code, s.department_id, s.role_id,
    s.start_time, s.end_time, s.break_start, s.break_end
"""


def _day_bounds(work_date: date) -> tuple[datetime, datetime]:
    # Range predicate instead of DATE(start_time) so the (employee_id, start_time) index is usable.
    start = datetime.combine(work_date, time.min)
    return start, start + timedelta(days=1)


def _to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        department_id=r.get("department_id"),
        role_id=r.get("role_id"),
        start=r.get("start_time"),
        end=r.get("end_time"),
        break_start=r.get("break_start"),
        break_end=r.get("break_end"),
    )


def insert_shifts(cur, shifts: Iterable[Shift]) -> int:
    """Insert new shifts on an open cursor and assign their ids. Caller owns the transaction."""
    count = 0
    for s in shifts:
        cur.execute(
            """
            INSERT INTO shifts(employee_id, department_id, role_id, start_time, end_time, break_start, break_end)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (s.employee_id, s.department_id, s.role_id, s.start, s.end, s.break_start, s.break_end),
        )
        s.shift_id = int(cur.lastrowid)
        count += 1
    return count


def update_shift_breaks(cur, shifts: Iterable[Shift]) -> int:
    """Write break fields of persisted shifts; COALESCE keeps any value already stored."""
    count = 0
    for s in shifts:
        cur.execute(
            """
            UPDATE shifts
            SET break_start=COALESCE(break_start, %s), break_end=COALESCE(break_end, %s)
            WHERE shift_id=%s
            """,
            (s.break_start, s.break_end, int(s.shift_id)),
        )
        count += 1
    return count


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_started_on(self, employee_code: str, work_date: date) -> Optional[Shift]:
        day_start, day_end = _day_bounds(work_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM shifts s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE e.code=%s AND s.start_time >= %s AND s.start_time < %s
                ORDER BY s.shift_id
                LIMIT 2
                """,
                (employee_code, day_start, day_end),
            )
            rows = fetchall(cur)
        if len(rows) > 1:
            raise DataIntegrityError(f"More than one shift for employee {employee_code} on {work_date:%Y-%m-%d}")
        return _to_shift(rows[0]) if rows else None

    def list_for_date(self, work_date: date) -> Sequence[Shift]:
        day_start, day_end = _day_bounds(work_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM shifts s
                JOIN employees e ON e.employee_id = s.employee_id
                WHERE s.start_time >= %s AND s.start_time < %s
                ORDER BY e.code, s.shift_id
                """,
                (day_start, day_end),
            )
            return [_to_shift(r) for r in fetchall(cur)]
