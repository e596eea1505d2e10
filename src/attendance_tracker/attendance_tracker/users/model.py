from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Domain entity: a login account.

    Plain data object, no DB access. ``user_code`` is the external-facing ID
    whose format depends on ``role``.
    """

    account_id: int
    username: str
    email: str
    password_hash: str
    role: Role
    user_code: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def public_view(self) -> dict:
        """Account fields safe to send to clients (no password hash)."""

        return {
            "id": self.account_id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "userId": self.user_code,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
