from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import SessionAction, SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SessionLog
from .repository import SessionLogRepository

_COLUMNS = """
    log_id, account_id, username, role, session_id, action, logged_at, status,
    ip_address, device_info, login_time, logout_time, duration_ms
"""


def _to_log(r: dict) -> SessionLog:
    return SessionLog(
        log_id=int(r["log_id"]),
        account_id=int(r["account_id"]),
        username=r["username"],
        role=r["role"],
        session_id=r["session_id"],
        action=SessionAction(r["action"]),
        timestamp=r["logged_at"],
        status=SessionStatus(r["status"]),
        ip_address=r.get("ip_address"),
        device_info=r.get("device_info"),
        login_time=r.get("login_time"),
        logout_time=r.get("logout_time"),
        duration_ms=int(r["duration_ms"]) if r.get("duration_ms") is not None else None,
    )


class MySQLSessionLogRepository(SessionLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO session_logs(
                    account_id, username, role, session_id, action, logged_at, status,
                    ip_address, device_info, login_time, logout_time, duration_ms
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(account_id), username, role, session_id, action.value, timestamp, status.value,
                    ip_address, device_info, login_time, logout_time, duration_ms,
                ),
            )
            return int(cur.lastrowid)

    def latest_active_login(self, account_id: int) -> Optional[SessionLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM session_logs
                WHERE account_id=%s AND action='LOGIN' AND status='active'
                ORDER BY logged_at DESC, log_id DESC
                LIMIT 1
                """,
                (int(account_id),),
            )
            r = fetchone(cur)
            return _to_log(r) if r else None

    def close_login(self, log_id: int, *, logout_time: datetime, duration_ms: int, status: SessionStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE session_logs
                SET logout_time=%s, duration_ms=%s, status=%s
                WHERE log_id=%s
                """,
                (logout_time, int(duration_ms), status.value, int(log_id)),
            )
            return cur.rowcount > 0

    def active_logins_before(self, threshold: datetime) -> Sequence[SessionLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM session_logs
                WHERE action='LOGIN' AND status='active' AND login_time < %s
                """,
                (threshold,),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[SessionLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM session_logs ORDER BY logged_at DESC, log_id DESC")
            return [_to_log(r) for r in fetchall(cur)]

    def list_for_account(self, account_id: int) -> Sequence[SessionLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM session_logs WHERE account_id=%s ORDER BY logged_at DESC, log_id DESC",
                (int(account_id),),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def clear(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM session_logs")
            return int(cur.rowcount)
