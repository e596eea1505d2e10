from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date, parse_timestamp
from ..common.http import current_account, json_body, json_endpoint, make_guards, query_int, require_self_or_staff
from ..common.validators import parse_enum, parse_float
from ..container import Container
from ..core.enums import AttendanceStatus, CaptureMethod, Role
from ..core.exceptions import ValidationError


def _parse_date_arg(name: str):
    try:
        return parse_optional_date(request.args.get(name))
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def _parse_location(raw):
    if not raw:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("location must be an object with latitude and longitude")
    lat = parse_float(raw.get("latitude"), "latitude")
    lon = parse_float(raw.get("longitude"), "longitude")
    if lat is None or lon is None:
        raise ValidationError("location must be an object with latitude and longitude")
    return lat, lon


def _require_class_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("classId must be an integer")


def register(app: Flask, container: Container) -> None:
    token_required, roles_required = make_guards(container.auth_service.verify_token)
    staff = roles_required(Role.ADMIN, Role.INSTRUCTOR)
    recorder = container.attendance_recorder

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_submit")
    @json_endpoint
    @token_required
    def submit():
        data = json_body()
        if not data.get("classId") or not data.get("studentId"):
            raise ValidationError("classId and studentId are required")
        student_code = str(data["studentId"]).strip()
        require_self_or_staff(current_account(), student_code)

        try:
            timestamp = parse_timestamp(data.get("timestamp"))
        except ValueError:
            raise ValidationError("timestamp must be an ISO-8601 date-time")

        result = recorder.record(
            _require_class_id(data["classId"]),
            student_code,
            status=parse_enum(AttendanceStatus, data["status"], "status") if data.get("status") else None,
            timestamp=timestamp,
            method=parse_enum(CaptureMethod, data["recordedVia"], "recordedVia") if data.get("recordedVia") else None,
            student_name=data.get("studentName"),
            device_info=data.get("deviceInfo"),
            ip_address=data.get("ipAddress") or request.remote_addr,
            location=_parse_location(data.get("location")),
        )
        return jsonify(result.to_dict()), (201 if result.created else 200)

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="attendance_bulk")
    @json_endpoint
    @staff
    def bulk():
        data = json_body()
        records = data.get("records")
        if not data.get("classId") or not isinstance(records, list):
            raise ValidationError("Invalid request data")
        try:
            day = parse_optional_date(data.get("date"))
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")
        return jsonify(recorder.bulk_update(_require_class_id(data["classId"]), records, day=day))

    @app.route("/api/attendance/class/<int:class_id>", methods=["GET"], endpoint="attendance_by_class")
    @json_endpoint
    @staff
    def by_class(class_id: int):
        events, stats = recorder.by_class(class_id, _parse_date_arg("date"))
        return jsonify({"attendance": [e.to_dict() for e in events], "stats": stats.to_dict()})

    @app.route("/api/attendance/student/<student_code>", methods=["GET"], endpoint="attendance_by_student")
    @json_endpoint
    @token_required
    def by_student(student_code: str):
        require_self_or_staff(current_account(), student_code)
        events, stats = recorder.by_student(
            student_code,
            class_id=query_int("classId"),
            start=_parse_date_arg("startDate"),
            end=_parse_date_arg("endDate"),
        )
        return jsonify({"attendance": [e.to_dict() for e in events], "stats": stats.to_dict(with_percentage=True)})

    @app.route(
        "/api/attendance/status/<int:class_id>/<student_code>", methods=["GET"], endpoint="attendance_status"
    )
    @json_endpoint
    @token_required
    def status(class_id: int, student_code: str):
        require_self_or_staff(current_account(), student_code)
        return jsonify({"status": recorder.status_for(class_id, student_code, _parse_date_arg("date")).value})
