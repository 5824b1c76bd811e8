from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..core.exceptions import InvalidTransitionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_date
from ..employees.model import Location
from ..employees.mysql_employee_repository import EMPLOYEE_ROWS_SQL, employees_from_rows
from ..shifts.model import Shift
from ..shifts.mysql_shift_repository import insert_shifts, update_shift_breaks
from .model import Record, Request
from .repository import RequestRepository

logger = logging.getLogger(__name__)

_REQUEST_COLUMNS = """
    r.request_id, r.location_code, r.request_date, r.status, r.fail_message, r.created_at,
    l.location_id, l.name AS location_name
"""


def _to_request(r: dict, records: Sequence[Record] = ()) -> Request:
    location = None
    if r.get("location_id") is not None:
        location = Location(location_id=int(r["location_id"]), code=r["location_code"], name=r["location_name"])
    return Request(
        request_id=int(r["request_id"]),
        location_code=r["location_code"],
        request_date=normalize_mysql_date(r["request_date"]),
        status=RequestStatus(r["status"]),
        fail_message=r.get("fail_message"),
        records=tuple(records),
        location=location,
        created_at=r.get("created_at"),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Worker side --------
    def has_pending(self) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM requests WHERE status=%s LIMIT 1", (RequestStatus.PENDING.value,))
            return fetchone(cur) is not None

    def list_pending(self) -> Sequence[Request]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM requests r
                LEFT JOIN locations l ON l.code = r.location_code
                WHERE r.status=%s
                ORDER BY r.request_id
                """,
                (RequestStatus.PENDING.value,),
            )
            heads = fetchall(cur)
            if not heads:
                return []

            ids = [int(h["request_id"]) for h in heads]
            cur.execute(
                f"""
                SELECT record_id, request_id, employee_code, clock_status, clock_value
                FROM records
                WHERE request_id IN ({in_clause(ids)})
                ORDER BY request_id, record_id
                """,
                tuple(ids),
            )
            record_rows = fetchall(cur)

            employees = {}
            codes = sorted({r["employee_code"] for r in record_rows})
            if codes:
                cur.execute(EMPLOYEE_ROWS_SQL.format(codes=in_clause(codes)), tuple(codes))
                employees = employees_from_rows(fetchall(cur))

        by_request: dict[int, list[Record]] = {rid: [] for rid in ids}
        for r in record_rows:
            by_request[int(r["request_id"])].append(
                Record(
                    record_id=int(r["record_id"]),
                    request_id=int(r["request_id"]),
                    employee_code=r["employee_code"],
                    raw_clock_status=int(r["clock_status"]),
                    clock_value=r["clock_value"],
                    employee=employees.get(r["employee_code"]),
                )
            )
        return [_to_request(h, by_request[int(h["request_id"])]) for h in heads]

    def claim(self, request_ids: Sequence[int]) -> int:
        ids = [int(i) for i in request_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE requests
                SET status=%s
                WHERE status=%s AND request_id IN ({in_clause(ids)})
                """,
                (RequestStatus.PROCESSING.value, RequestStatus.PENDING.value, *ids),
            )
            return int(cur.rowcount or 0)

    def release(self, request_ids: Sequence[int]) -> int:
        ids = [int(i) for i in request_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE requests
                SET status=%s
                WHERE status=%s AND request_id IN ({in_clause(ids)})
                """,
                (RequestStatus.PENDING.value, RequestStatus.PROCESSING.value, *ids),
            )
            return int(cur.rowcount or 0)

    def mark_failed(self, *, request_id: int, fail_message: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE requests
                SET status=%s, fail_message=%s
                WHERE request_id=%s AND status=%s
                """,
                (RequestStatus.FAILED.value, fail_message, int(request_id), RequestStatus.PROCESSING.value),
            )
            return int(cur.rowcount or 0) == 1

    def complete(self, *, request_id: int, created: Sequence[Shift], updated: Sequence[Shift]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE requests
                SET status=%s, fail_message=NULL
                WHERE request_id=%s AND status=%s
                """,
                (RequestStatus.COMPLETED.value, int(request_id), RequestStatus.PROCESSING.value),
            )
            if int(cur.rowcount or 0) != 1:
                # Raising rolls the whole unit back; no shift is written for a request we do not own.
                raise InvalidTransitionError(f"Request {request_id} is no longer Processing")
            inserted = insert_shifts(cur, created)
            touched = update_shift_breaks(cur, updated)
        logger.debug("Request %s: inserted %d shift(s), updated %d", request_id, inserted, touched)
        return True

    # -------- Operator side --------
    def get_by_id(self, request_id: int) -> Optional[Request]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM requests r
                LEFT JOIN locations l ON l.code = r.location_code
                WHERE r.request_id=%s
                """,
                (int(request_id),),
            )
            head = fetchone(cur)
            if not head:
                return None
            cur.execute(
                """
                SELECT record_id, request_id, employee_code, clock_status, clock_value
                FROM records
                WHERE request_id=%s
                ORDER BY record_id
                """,
                (int(request_id),),
            )
            records = [
                Record(
                    record_id=int(r["record_id"]),
                    request_id=int(r["request_id"]),
                    employee_code=r["employee_code"],
                    raw_clock_status=int(r["clock_status"]),
                    clock_value=r["clock_value"],
                )
                for r in fetchall(cur)
            ]
            return _to_request(head, records)

    def list_by_status(self, *, status: Optional[RequestStatus] = None, limit: int = 200) -> Sequence[Request]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM requests r
                LEFT JOIN locations l ON l.code = r.location_code
                WHERE {where}
                ORDER BY r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def requeue(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE requests SET status=%s WHERE request_id=%s AND status=%s",
                (RequestStatus.PENDING.value, int(request_id), RequestStatus.PROCESSING.value),
            )
            return int(cur.rowcount or 0) == 1
