from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.http import json_body, json_endpoint, make_guards
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def _date_arg(value, name: str):
    try:
        return parse_optional_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    _, roles_required = make_guards(container.auth_service.verify_token)
    staff = roles_required(Role.ADMIN, Role.INSTRUCTOR)
    reports = container.report_service

    def _saved(report, created: bool):
        message = "Report saved successfully" if created else "Report updated successfully"
        return jsonify({"message": message, "report": report.to_dict()}), (201 if created else 200)

    @app.route("/api/reports", methods=["POST"], endpoint="reports_save")
    @json_endpoint
    @staff
    def save():
        return _saved(*reports.save(json_body()))

    @app.route("/api/reports/snapshot", methods=["POST"], endpoint="reports_snapshot")
    @json_endpoint
    @staff
    def snapshot():
        data = json_body()
        try:
            class_id = int(data.get("classId"))
        except (TypeError, ValueError):
            raise ValidationError("classId is required")
        day = _date_arg(data.get("date"), "date") or now_local().date()
        return _saved(*reports.snapshot_from_events(class_id, day))

    @app.route("/api/reports", methods=["GET"], endpoint="reports_list")
    @json_endpoint
    @staff
    def list_all():
        found = reports.list_all(
            start=_date_arg(request.args.get("startDate"), "startDate"),
            end=_date_arg(request.args.get("endDate"), "endDate"),
        )
        return jsonify([r.to_dict() for r in found])

    @app.route("/api/reports/class/<int:class_id>", methods=["GET"], endpoint="reports_by_class")
    @json_endpoint
    @staff
    def by_class(class_id: int):
        found = reports.list_for_class(
            class_id,
            start=_date_arg(request.args.get("startDate"), "startDate"),
            end=_date_arg(request.args.get("endDate"), "endDate"),
        )
        return jsonify([r.to_dict() for r in found])

    @app.route("/api/reports/<int:report_id>", methods=["DELETE"], endpoint="reports_delete")
    @json_endpoint
    @staff
    def delete(report_id: int):
        reports.delete(report_id)
        return jsonify({"message": "Report deleted successfully"})
