from __future__ import annotations

import logging
import signal

import click
from flask import Flask, jsonify, request

from ..common.datetime_utils import format_ts, parse_iso_date
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus
from ..core.exceptions import DomainError, InvalidTransitionError, NotFoundError
from ..container import Container
from ..requests.model import Request
from ..shifts.model import Shift

logger = logging.getLogger(__name__)


def _request_json(req: Request, *, with_records: bool = False) -> dict:
    out = {
        "request_id": req.request_id,
        "location_code": req.location_code,
        "location_name": req.location_name,
        "date": req.request_date.strftime("%Y-%m-%d"),
        "status": req.status.value,
        "fail_message": req.fail_message or "",
    }
    if with_records:
        out["records"] = [
            {
                "record_id": r.record_id,
                "employee_code": r.employee_code,
                "clock_status": r.clock_status.name if r.clock_status is not None else r.raw_clock_status,
                "clock_value": format_ts(r.clock_value),
            }
            for r in req.records
        ]
    return out


def _shift_json(s: Shift) -> dict:
    return {
        "shift_id": s.shift_id,
        "employee_code": s.employee_code,
        "department_id": s.department_id,
        "role_id": s.role_id,
        "start": format_ts(s.start),
        "end": format_ts(s.end),
        "break_start": format_ts(s.break_start),
        "break_end": format_ts(s.break_end),
    }


def register(app: Flask, container: Container) -> None:
    service = container.processing_service

    @app.errorhandler(NotFoundError)
    def not_found(e):
        return jsonify(error=str(e)), 404

    @app.errorhandler(InvalidTransitionError)
    def conflict(e):
        return jsonify(error=str(e)), 409

    @app.errorhandler(DomainError)
    def bad_request(e):
        return jsonify(error=str(e)), 400

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify(status="ok")

    @app.route("/requests", methods=["GET"], endpoint="list_requests")
    def list_requests():
        raw = (request.args.get("status") or "").strip().upper()
        try:
            status = RequestStatus(raw) if raw else None
        except ValueError:
            return jsonify(error=f"Unknown status {raw!r}"), 400
        limit = request.args.get("limit", default=DEFAULT_LIST_LIMIT, type=int)
        rows = service.list_requests(status=status, limit=limit)
        return jsonify(requests=[_request_json(r) for r in rows])

    @app.route("/requests/<int:request_id>", methods=["GET"], endpoint="get_request")
    def get_request(request_id: int):
        return jsonify(_request_json(service.get_request(request_id), with_records=True))

    @app.route("/requests/<int:request_id>/requeue", methods=["POST"], endpoint="requeue_request")
    def requeue_request(request_id: int):
        service.requeue(request_id)
        return jsonify(_request_json(service.get_request(request_id)))

    @app.route("/shifts", methods=["GET"], endpoint="list_shifts")
    def list_shifts():
        try:
            work_date = parse_iso_date(request.args.get("date") or "")
        except ValueError:
            return jsonify(error="date must be YYYY-MM-DD"), 400
        return jsonify(shifts=[_shift_json(s) for s in container.shifts_repo.list_for_date(work_date)])

    @app.cli.command("run-worker")
    @click.option("--interval", type=float, default=None, help="Seconds between polls.")
    def run_worker(interval):
        """Poll for pending requests until interrupted."""
        worker = container.build_worker(interval=interval)

        def _on_sigterm(*_):
            logger.info("SIGTERM received, stopping after the current cycle")
            worker.stop()

        signal.signal(signal.SIGTERM, _on_sigterm)
        try:
            worker.run()
        except KeyboardInterrupt:
            worker.stop()

    @app.cli.command("process-once")
    def process_once():
        """Run a single claim-and-process cycle."""
        report = service.process_pending()
        click.echo(f"claimed={report.claimed} completed={report.completed} failed={report.failed}")

    @app.cli.command("requeue")
    @click.argument("request_id", type=int)
    def requeue(request_id):
        """Put an orphaned Processing request back to Pending."""
        try:
            service.requeue(request_id)
        except DomainError as e:
            raise click.ClickException(str(e))
        click.echo(f"Request {request_id} requeued")
