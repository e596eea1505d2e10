from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from ..core.constants import USER_CODE_PATTERNS
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_fields(payload: Mapping[str, Any], fields: Sequence[str]) -> None:
    missing = [f for f in fields if payload.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields. Required: {', '.join(fields)}")


def require_user_code(role: str, user_code: str) -> str:
    """Check the external-facing account ID against its role's format."""

    user_code = (user_code or "").strip()
    rule = USER_CODE_PATTERNS.get(role)
    if rule is None:
        raise ValidationError("Invalid role")
    pattern, example = rule
    if not re.match(pattern, user_code):
        raise ValidationError(f"Invalid {role} ID format. Use format: {example}")
    return user_code


def parse_enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field_name}. Allowed: {allowed}")


def parse_float(value, field_name: str):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
