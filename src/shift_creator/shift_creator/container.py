from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_POLL_INTERVAL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .processing.service import RequestProcessingService
from .processing.worker import ShiftWorker
from .requests.mysql_request_repository import MySQLRequestRepository
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.reconciler import ShiftReconciler


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    shifts_repo: MySQLShiftRepository
    requests_repo: MySQLRequestRepository

    reconciler: ShiftReconciler
    processing_service: RequestProcessingService
    poll_interval: float

    def build_worker(self, *, interval: float | None = None) -> ShiftWorker:
        return ShiftWorker(self.processing_service, interval=self.poll_interval if interval is None else interval)


def build_container(*, db_config: dict, poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    requests_repo = MySQLRequestRepository(conn)

    reconciler = ShiftReconciler(shifts_repo, employees_repo)
    processing_service = RequestProcessingService(requests_repo, reconciler)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        shifts_repo=shifts_repo,
        requests_repo=requests_repo,
        reconciler=reconciler,
        processing_service=processing_service,
        poll_interval=float(poll_interval),
    )
