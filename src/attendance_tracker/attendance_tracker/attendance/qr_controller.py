from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_timestamp
from ..common.http import current_account, json_body, json_endpoint, make_guards
from ..common.validators import require_fields
from ..container import Container
from ..core.exceptions import ValidationError


def _class_id(data) -> int:
    try:
        return int(data["classId"])
    except (TypeError, ValueError):
        raise ValidationError("classId must be an integer")


def register(app: Flask, container: Container) -> None:
    token_required, _ = make_guards(container.auth_service.verify_token)
    qr = container.qr_service

    @app.route("/api/qr/generate", methods=["POST"], endpoint="qr_generate")
    @json_endpoint
    @token_required
    def generate():
        data = json_body()
        require_fields(data, ("classId",))
        return jsonify(qr.generate(_class_id(data), current_account()))

    @app.route("/api/qr/validate", methods=["POST"], endpoint="qr_validate")
    @json_endpoint
    @token_required
    def validate():
        result = qr.validate(json_body().get("token", ""), current_account())
        return jsonify({"message": "Attendance marked successfully", "attendance": result.event.to_dict()})

    @app.route("/api/qr/mark", methods=["POST"], endpoint="qr_mark")
    @json_endpoint
    @token_required
    def mark():
        data = json_body()
        require_fields(data, ("classId", "studentId", "timestamp"))
        try:
            timestamp = parse_timestamp(data["timestamp"])
        except ValueError:
            raise ValidationError("timestamp must be an ISO-8601 date-time")
        result = qr.mark_from_student_code(
            _class_id(data), str(data["studentId"]).strip(), current_account(), timestamp=timestamp
        )
        message = "Attendance marked successfully" if result.created else "Attendance updated successfully"
        return jsonify({"message": message, "attendance": result.event.to_dict()})
