from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionAction, SessionStatus
from .model import SessionLog


class SessionLogRepository(Protocol):
    def add(
        self,
        *,
        account_id: int,
        username: str,
        role: str,
        session_id: str,
        action: SessionAction,
        timestamp: datetime,
        status: SessionStatus,
        ip_address: Optional[str] = None,
        device_info: Optional[str] = None,
        login_time: Optional[datetime] = None,
        logout_time: Optional[datetime] = None,
        duration_ms: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def latest_active_login(self, account_id: int) -> Optional[SessionLog]:
        raise NotImplementedError

    def close_login(self, log_id: int, *, logout_time: datetime, duration_ms: int, status: SessionStatus) -> bool:
        """Stamp logout time/duration/status onto a LOGIN row."""

        raise NotImplementedError

    def active_logins_before(self, threshold: datetime) -> Sequence[SessionLog]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SessionLog]:
        """All rows, newest timestamp first."""

        raise NotImplementedError

    def list_for_account(self, account_id: int) -> Sequence[SessionLog]:
        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError
