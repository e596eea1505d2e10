from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_account, json_body, json_endpoint, make_guards
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    token_required, roles_required = make_guards(container.auth_service.verify_token)
    staff = roles_required(Role.ADMIN, Role.INSTRUCTOR)

    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    @json_endpoint
    @token_required
    def list_classes():
        account = current_account()
        if account.role == Role.INSTRUCTOR:
            classes = container.class_service.list_for_instructor(account.user_code)
        else:
            classes = container.class_service.list_all()
        return jsonify([c.to_dict() for c in classes])

    @app.route("/api/classes/<int:class_id>", methods=["GET"], endpoint="classes_get")
    @json_endpoint
    @token_required
    def get_class(class_id: int):
        return jsonify(container.class_service.get(class_id).to_dict())

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @json_endpoint
    @staff
    def create_class():
        account = current_account()
        default_instructor = account.user_code if account.role == Role.INSTRUCTOR else None
        created = container.class_service.create(json_body(), default_instructor=default_instructor)
        return jsonify(created.to_dict()), 201

    @app.route("/api/classes/<int:class_id>", methods=["PUT"], endpoint="classes_update")
    @json_endpoint
    @staff
    def update_class(class_id: int):
        return jsonify(container.class_service.update(class_id, json_body()).to_dict())

    @app.route("/api/classes/<int:class_id>", methods=["DELETE"], endpoint="classes_delete")
    @json_endpoint
    @staff
    def delete_class(class_id: int):
        container.class_service.delete(class_id)
        return jsonify({"message": "Class deleted successfully"})
