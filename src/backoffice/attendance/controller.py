from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime, parse_time
from ..common.partial import UNSET
from ..common.timecalc import BreakInterval
from ..common.validators import require_id
from ..common.web import business_required, field, json_body, optional_str, parse_bool, parse_enum
from ..container import Container
from ..core.enums import AttendanceStatus
from .model import AttendanceUpdate


def _break_from(data: dict):
    return BreakInterval.from_optional(
        parse_time(data.get("break_start"), "break_start"),
        parse_time(data.get("break_end"), "break_end"),
    )


def _time_field(data: dict, name: str):
    value = field(data, name)
    return UNSET if value is UNSET else parse_time(value, name)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @business_required
    def clock_in():
        data = json_body()
        record = service.clock_in(
            g.business_id,
            require_id(data.get("employee_id"), "employee_id"),
            now=parse_iso_datetime(data.get("timestamp")),
            note=optional_str(data.get("note")),
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @business_required
    def clock_out():
        data = json_body()
        record = service.clock_out(
            g.business_id,
            require_id(data.get("employee_id"), "employee_id"),
            now=parse_iso_datetime(data.get("timestamp")),
            break_interval=_break_from(data),
            is_holiday=parse_bool(data.get("is_holiday", False)),
            note=optional_str(data.get("note")),
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="attendance_manual")
    @business_required
    def record_manual():
        data = json_body()
        record = service.record_manual_attendance(
            g.business_id,
            require_id(data.get("employee_id"), "employee_id"),
            parse_iso_date(data.get("date"), "date"),
            clock_in=parse_time(data.get("clock_in"), "clock_in"),
            clock_out=parse_time(data.get("clock_out"), "clock_out"),
            break_interval=_break_from(data),
            status_override=parse_enum(AttendanceStatus, data.get("status"), "status"),
            is_holiday=parse_bool(data.get("is_holiday", False)),
            note=optional_str(data.get("note")),
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="attendance_update")
    @business_required
    def update(attendance_id: int):
        data = json_body()
        status = field(data, "status")
        note = field(data, "note")
        changes = AttendanceUpdate(
            check_in_time=_time_field(data, "clock_in"),
            check_out_time=_time_field(data, "clock_out"),
            break_start_time=_time_field(data, "break_start"),
            break_end_time=_time_field(data, "break_end"),
            status=UNSET if status is UNSET else parse_enum(AttendanceStatus, status, "status"),
            note=UNSET if note is UNSET else optional_str(note),
        )
        record = service.update_attendance(
            g.business_id,
            attendance_id,
            changes,
            is_holiday=parse_bool(data.get("is_holiday", False)),
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @business_required
    def delete(attendance_id: int):
        service.delete_attendance(g.business_id, attendance_id)
        return jsonify({"message": "Attendance record deleted"})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @business_required
    def today():
        employee_id = require_id(request.args.get("employee_id"), "employee_id")
        record = service.get_today(g.business_id, employee_id)
        return jsonify({"attendance": record.to_dict() if record else None})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @business_required
    def list_records():
        employee_id = require_id(request.args.get("employee_id"), "employee_id")
        start = parse_iso_date(request.args.get("start"), "start")
        end = parse_iso_date(request.args.get("end"), "end")
        records = service.list_attendance(g.business_id, employee_id, start=start, end=end)
        return jsonify({"attendance": [r.to_dict() for r in records]})
