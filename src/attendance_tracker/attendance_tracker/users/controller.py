from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_account, json_body, json_endpoint, make_guards
from ..container import Container
from ..core.enums import Role


def _client_meta() -> dict:
    return {
        "ip_address": request.headers.get("X-Forwarded-For", request.remote_addr),
        "device_info": request.headers.get("User-Agent"),
    }


def register(app: Flask, container: Container) -> None:
    token_required, roles_required = make_guards(container.auth_service.verify_token)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    @json_endpoint
    def login():
        data = json_body()
        account = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        token = container.auth_service.issue_token(account)
        container.session_service.record_login(account, **_client_meta())
        return jsonify({**account.public_view(), "token": token})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @json_endpoint
    @token_required
    def me():
        return jsonify(current_account().public_view())

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @json_endpoint
    @token_required
    def logout():
        container.session_service.record_logout(current_account(), **_client_meta())
        return jsonify({"message": "Logged out successfully"})

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="auth_change_password")
    @json_endpoint
    @token_required
    def change_password():
        data = json_body()
        container.auth_service.change_password(
            current_account(),
            current_password=data.get("currentPassword", ""),
            new_password=data.get("newPassword", ""),
        )
        return jsonify({"message": "Password updated successfully"})

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def list_users():
        accounts = container.account_service.list_accounts(current_account())
        return jsonify([a.public_view() for a in accounts])

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def create_user():
        data = json_body()
        account = container.account_service.create_account(
            current_account(),
            username=data.get("username", ""),
            email=data.get("email", ""),
            role=data.get("role"),
            user_code=data.get("userId", ""),
        )
        return jsonify(account.public_view()), 201

    @app.route("/api/users/<int:account_id>", methods=["GET"], endpoint="users_get")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def get_user(account_id: int):
        return jsonify(container.account_service.get_account(current_account(), account_id).public_view())

    @app.route("/api/users/<int:account_id>", methods=["PUT"], endpoint="users_update")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def update_user(account_id: int):
        data = json_body()
        account = container.account_service.update_account(
            current_account(),
            account_id,
            username=data.get("username"),
            email=data.get("email"),
            role=data.get("role"),
            user_code=data.get("userId"),
        )
        return jsonify(account.public_view())

    @app.route("/api/users/<int:account_id>", methods=["DELETE"], endpoint="users_delete")
    @json_endpoint
    @roles_required(Role.ADMIN)
    def delete_user(account_id: int):
        container.account_service.delete_account(current_account(), account_id)
        return jsonify({"message": "User removed"})
