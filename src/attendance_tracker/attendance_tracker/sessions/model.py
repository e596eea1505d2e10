from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SessionAction, SessionStatus


@dataclass(frozen=True)
class SessionLog:
    """One LOGIN or LOGOUT row; rows of one session share ``session_id``."""

    log_id: int
    account_id: int
    username: str
    role: str
    session_id: str
    action: SessionAction
    timestamp: datetime
    status: SessionStatus
    ip_address: Optional[str] = None
    device_info: Optional[str] = None
    login_time: Optional[datetime] = None
    logout_time: Optional[datetime] = None
    duration_ms: Optional[int] = None


@dataclass(frozen=True)
class SessionSummary:
    """Read-model: a login/logout pair reconstructed from the log rows."""

    session_id: str
    account_id: int
    username: str
    role: str
    login_time: Optional[datetime]
    logout_time: Optional[datetime]
    duration_ms: Optional[int]
    status: SessionStatus
    device_info: Optional[str]
    ip_address: Optional[str]

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "userId": self.account_id,
            "username": self.username,
            "role": self.role,
            "loginTime": self.login_time.isoformat() if self.login_time else None,
            "logoutTime": self.logout_time.isoformat() if self.logout_time else None,
            "duration": self.duration_ms,
            "status": self.status.value,
            "deviceInfo": self.device_info,
            "ipAddress": self.ip_address,
        }
