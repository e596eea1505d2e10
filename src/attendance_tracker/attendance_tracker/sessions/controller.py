from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_account, json_endpoint, make_guards
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    token_required, roles_required = make_guards(container.auth_service.verify_token)
    sessions = container.session_service

    @app.route("/api/logs", methods=["GET"], endpoint="logs_list")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def list_logs():
        return jsonify([s.to_dict() for s in sessions.activity()])

    @app.route("/api/logs/activity", methods=["GET"], endpoint="logs_activity")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def activity():
        return jsonify([s.to_dict() for s in sessions.activity()])

    @app.route("/api/logs/user/<int:account_id>", methods=["GET"], endpoint="logs_for_user")
    @json_endpoint
    @token_required
    def user_logs(account_id: int):
        account = current_account()
        if account.role != Role.ADMIN and account.account_id != account_id:
            raise AuthorizationError("Not authorized to view these logs")
        return jsonify([s.to_dict() for s in sessions.history(account_id)])

    @app.route("/api/logs/clear", methods=["DELETE"], endpoint="logs_clear")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def clear():
        removed = sessions.clear()
        return jsonify({"message": "All logs cleared successfully", "deleted": removed})
