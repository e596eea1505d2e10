"""Shared helpers for the JSON controllers: bearer guards and error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

import mysql.connector
from flask import g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, DuplicateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def error_body(err: DomainError) -> dict:
    body: dict[str, Any] = {"message": str(err)}
    if isinstance(err, NotFoundError) and err.details:
        body["details"] = err.details
    if isinstance(err, DuplicateError) and err.fields:
        body["duplicates"] = err.fields
    return body


def json_endpoint(view):
    """Turn domain and store errors raised by ``view`` into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return jsonify(error_body(e)), e.status_code
        except mysql.connector.Error as e:
            logger.exception("store error in %s", request.path)
            return jsonify({"message": "Database error", "error": str(e)}), 500
        except Exception:
            logger.exception("unhandled error in %s", request.path)
            return jsonify({"message": "Internal server error"}), 500

    return wrapper


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return ""


def current_account():
    return g.current_account


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def make_guards(resolve_account: Callable[[str], Any]):
    """Build ``token_required`` / ``roles_required`` decorators around a token resolver.

    The resolved account is stored on ``flask.g.current_account``. Both
    decorators sit under ``json_endpoint`` so their errors become JSON.
    """

    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_account = resolve_account(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def roles_required(*roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                account = resolve_account(bearer_token())
                if account.role not in roles:
                    raise AuthorizationError("You do not have permission to perform this action")
                g.current_account = account
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return token_required, roles_required


def query_int(name: str):
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def require_self_or_staff(account, student_code: str) -> None:
    """Students may only read or write their own records."""

    if account.role == Role.STUDENT and account.user_code != student_code:
        raise AuthorizationError("Not authorized to access another student's records")
