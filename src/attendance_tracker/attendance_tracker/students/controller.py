from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.http import current_account, json_body, json_endpoint, make_guards, require_self_or_staff
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    token_required, roles_required = make_guards(container.auth_service.verify_token)
    staff = roles_required(Role.ADMIN, Role.INSTRUCTOR)
    enrollment = container.enrollment_service

    @app.route("/api/students/<int:class_id>", methods=["GET"], endpoint="students_by_class")
    @json_endpoint
    @staff
    def students_by_class(class_id: int):
        return jsonify([s.to_dict() for s in enrollment.list_for_class(class_id)])

    @app.route("/api/students", methods=["POST"], endpoint="students_add")
    @json_endpoint
    @staff
    def add_student():
        data = json_body()
        class_id = data.get("classId")
        if class_id in (None, ""):
            raise ValidationError("classId is required")
        try:
            class_id = int(class_id)
        except (TypeError, ValueError):
            raise ValidationError("classId must be an integer")
        student = enrollment.add(class_id, data)
        return jsonify({"message": "Student added successfully", "student": student.to_dict()}), 201

    @app.route("/api/students/<int:class_id>/<student_code>", methods=["PUT"], endpoint="students_update")
    @json_endpoint
    @staff
    def update_student(class_id: int, student_code: str):
        student = enrollment.update(class_id, student_code, json_body())
        return jsonify(student.to_dict())

    @app.route("/api/students/<int:class_id>/<student_code>", methods=["DELETE"], endpoint="students_remove")
    @json_endpoint
    @staff
    def remove_student(class_id: int, student_code: str):
        removed = enrollment.remove(class_id, student_code)
        return jsonify({"message": "Student removed successfully", "attendanceRemoved": removed})

    @app.route("/api/students/<student_code>/classes/today", methods=["GET"], endpoint="students_today_classes")
    @json_endpoint
    @token_required
    def today_classes(student_code: str):
        require_self_or_staff(current_account(), student_code)
        classes = enrollment.today_classes(student_code, now_local().date())
        return jsonify([c.to_dict() for c in classes])

    @app.route(
        "/api/students/<student_code>/attendance/overview", methods=["GET"], endpoint="students_overview"
    )
    @json_endpoint
    @token_required
    def attendance_overview(student_code: str):
        require_self_or_staff(current_account(), student_code)
        return jsonify(enrollment.attendance_overview(student_code))

    @app.route("/api/students/<student_code>/attendance/today", methods=["GET"], endpoint="students_today_status")
    @json_endpoint
    @token_required
    def today_status(student_code: str):
        require_self_or_staff(current_account(), student_code)
        return jsonify(enrollment.today_status(student_code, now_local().date()))
