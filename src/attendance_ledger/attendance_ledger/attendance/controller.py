from __future__ import annotations

import base64
import binascii
import csv
import io
import logging
from dataclasses import asdict
from functools import wraps

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..core.enums import StatusFilter
from ..core.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from ..container import Container
from .lateness import compute_lateness
from .model import AttendanceRecord
from .reconstructor import filter_entries, summarize

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreUnavailableError, 503),
)


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "employee_id": r.employee_id,
        "date": r.work_date.strftime("%Y-%m-%d"),
        "status": r.status.value,
        "late_minutes": r.late_minutes,
        "created_at": r.created_at.isoformat() if r.created_at else None,
        "photo_url": r.photo_url,
        "note": r.note,
        "clock_out_at": r.clock_out_at.isoformat() if r.clock_out_at else None,
        "clock_out_photo_url": r.clock_out_photo_url,
    }


def register(app: Flask, container: Container) -> None:
    def api_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                for exc_type, code in _ERROR_STATUS:
                    if isinstance(e, exc_type):
                        if code >= 500:
                            logger.warning("%s failed: %s", request.path, e)
                        return jsonify({"success": False, "message": str(e)}), code
                raise

        return wrapper

    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Expected a JSON object body")
        return data

    def _required(data: dict, key: str):
        value = data.get(key)
        if value is None or value == "":
            raise ValidationError(f"Missing field: {key}")
        return value

    def _photo(data: dict):
        if not data.get("photo"):
            return None
        # Camera clients send a data URL ("data:image/jpeg;base64,...").
        encoded = str(data["photo"]).split(",", 1)[-1]
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("photo must be base64 encoded") from None

    def _month_args() -> tuple[int, int]:
        today = container.clock.now().date()
        try:
            month = int(request.args.get("month", today.month))
            year = int(request.args.get("year", today.year))
        except ValueError:
            raise ValidationError("month/year must be integers") from None
        return month, year

    @app.route("/api/attendance/lateness", methods=["GET"], endpoint="api_lateness")
    @api_errors
    def api_lateness():
        at = request.args.get("at")
        instant = parse_iso_datetime(at) if at else container.clock.now()
        result = compute_lateness(instant)
        return jsonify(
            {
                "late_minutes": result.late_minutes,
                "target_time": result.target_time.isoformat(),
                "shift_window_start": result.shift_window_start.isoformat(),
                "effective_time": result.effective_time.isoformat(),
            }
        )

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_mark_attendance")
    @api_errors
    def api_mark_attendance():
        data = _json_body()
        record = container.attendance_service.mark_attendance(
            _required(data, "employee_id"),
            _required(data, "status"),
            parse_iso_date(_required(data, "date")),
        )
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/attendance/correct", methods=["POST"], endpoint="api_correct_status")
    @api_errors
    def api_correct_status():
        data = _json_body()
        record = container.attendance_service.correct_status(
            _required(data, "employee_id"),
            parse_iso_date(_required(data, "date")),
            _required(data, "status"),
            data.get("note"),
        )
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/attendance/lateness", methods=["POST"], endpoint="api_set_lateness")
    @api_errors
    def api_set_lateness():
        data = _json_body()
        record = container.attendance_service.set_lateness(
            _required(data, "employee_id"),
            parse_iso_date(_required(data, "date")),
            _required(data, "late_minutes"),
        )
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    @api_errors
    def api_checkin():
        data = _json_body()
        record = container.attendance_service.check_in(
            _required(data, "employee_id"),
            data.get("status") or "PRESENT",
            photo=_photo(data),
        )
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/attendance/clockout", methods=["POST"], endpoint="api_clock_out")
    @api_errors
    def api_clock_out():
        data = _json_body()
        record = container.attendance_service.clock_out(_required(data, "employee_id"), photo=_photo(data))
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/attendance/open", methods=["GET"], endpoint="api_open_check_ins")
    @api_errors
    def api_open_check_ins():
        return jsonify([record_to_dict(r) for r in container.attendance_service.list_open_check_ins()])

    @app.route("/api/attendance/resolve", methods=["POST"], endpoint="api_resolve_open_check_in")
    @api_errors
    def api_resolve_open_check_in():
        data = _json_body()
        record = container.attendance_service.resolve_open_check_in(
            _required(data, "employee_id"),
            parse_iso_date(_required(data, "date")),
            parse_iso_datetime(_required(data, "clock_out_at")),
            data.get("note"),
        )
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="api_daily_stats")
    @api_errors
    def api_daily_stats():
        date_s = request.args.get("date")
        stats = container.stats_service.get_daily_stats(parse_iso_date(date_s) if date_s else None)
        return jsonify(asdict(stats))

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    @api_errors
    def api_employees():
        employees = container.employees_repo.list_all()
        return jsonify([{"employee_id": e.employee_id, "name": e.name, "photo_url": e.photo_url} for e in employees])

    @app.route("/api/employees/<int:employee_id>/attendance/today", methods=["GET"], endpoint="api_employee_today")
    @api_errors
    def api_employee_today(employee_id: int):
        record = container.attendance_service.get_today_record(employee_id)
        return jsonify({"employee_id": employee_id, "record": record_to_dict(record) if record else None})

    @app.route("/api/employees/<int:employee_id>/attendance", methods=["GET"], endpoint="api_employee_month")
    @api_errors
    def api_employee_month(employee_id: int):
        month, year = _month_args()
        status_filter = request.args.get("status") or StatusFilter.ALL
        entries = container.reconstructor.reconstruct_month(employee_id, month, year)
        return jsonify(
            {
                "employee_id": employee_id,
                "month": month,
                "year": year,
                "summary": asdict(summarize(entries)),
                "rows": [container.reconstructor.to_ui(e) for e in filter_entries(entries, status_filter)],
            }
        )

    @app.route("/api/employees/<int:employee_id>/attendance.csv", methods=["GET"], endpoint="api_employee_month_csv")
    @api_errors
    def api_employee_month_csv(employee_id: int):
        month, year = _month_args()
        entries = filter_entries(
            container.reconstructor.reconstruct_month(employee_id, month, year),
            request.args.get("status") or StatusFilter.ALL,
        )

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=["date", "status", "late_minutes", "note", "persisted"])
        writer.writeheader()
        for e in entries:
            writer.writerow(
                {
                    "date": e.work_date.strftime("%Y-%m-%d"),
                    "status": e.status.value,
                    "late_minutes": e.late_minutes,
                    "note": e.note or "",
                    "persisted": int(e.is_persisted),
                }
            )

        filename = f"attendance_{employee_id}_{year:04d}{month:02d}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
