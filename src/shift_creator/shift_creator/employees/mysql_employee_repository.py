from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_bool, normalize_mysql_date
from .model import Department, Employee, Employment, Location
from .repository import EmployeeRepository

EMPLOYEE_ROWS_SQL = """
    SELECT e.employee_id, e.code, e.full_name,
           em.employment_id, em.role_id, em.start_date, em.end_date, em.is_deleted,
           d.department_id, d.name AS department_name,
           l.location_id, l.code AS location_code, l.name AS location_name
    FROM employees e
    LEFT JOIN employments em ON em.employee_id = e.employee_id
    LEFT JOIN departments d ON d.department_id = em.department_id
    LEFT JOIN locations l ON l.location_id = d.location_id
    WHERE e.code IN ({codes})
    ORDER BY e.employee_id, em.employment_id
"""


def employees_from_rows(rows: list[dict]) -> dict[str, Employee]:
    """Fold the flat employee/employment join into Employee aggregates keyed by code."""
    heads: dict[str, dict] = {}
    employments: dict[str, list[Employment]] = {}

    for r in rows:
        code = r["code"]
        if code not in heads:
            heads[code] = r
            employments[code] = []
        if r.get("employment_id") is None:
            continue
        location = Location(
            location_id=int(r["location_id"]),
            code=r["location_code"],
            name=r["location_name"],
        )
        employments[code].append(
            Employment(
                employment_id=int(r["employment_id"]),
                employee_id=int(r["employee_id"]),
                department=Department(
                    department_id=int(r["department_id"]),
                    name=r["department_name"],
                    location=location,
                ),
                role_id=int(r["role_id"]),
                start_date=normalize_mysql_date(r["start_date"]),
                end_date=normalize_mysql_date(r.get("end_date")),
                is_deleted=normalize_mysql_bool(r.get("is_deleted")),
            )
        )

    return {
        code: Employee(
            employee_id=int(head["employee_id"]),
            code=code,
            full_name=head.get("full_name") or "",
            employments=tuple(employments[code]),
        )
        for code, head in heads.items()
    }


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_code(self, code: str) -> Optional[Employee]:
        return self.get_many_by_code([code]).get(code)

    def get_many_by_code(self, codes: Sequence[str]) -> dict[str, Employee]:
        codes = sorted(set(codes))
        if not codes:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(EMPLOYEE_ROWS_SQL.format(codes=in_clause(codes)), tuple(codes))
            return employees_from_rows(fetchall(cur))
