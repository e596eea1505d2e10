from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus, CaptureMethod
from ..core.exceptions import DuplicateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceEvent
from .repository import AttendanceRepository

_COLUMNS = """
    event_id, class_id, student_code, student_name, event_date, event_timestamp,
    status, method, device_info, ip_address, latitude, longitude
"""


def _to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        class_id=int(r["class_id"]),
        student_code=r["student_code"],
        student_name=r.get("student_name"),
        event_date=r["event_date"],
        timestamp=r["event_timestamp"],
        status=AttendanceStatus(r["status"]),
        method=CaptureMethod(r["method"]),
        device_info=r.get("device_info"),
        ip_address=r.get("ip_address"),
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def get_for_day(self, class_id: int, student_code: str, day: date) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE class_id=%s AND student_code=%s AND event_date=%s
                """,
                (int(class_id), student_code, day),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def create(
        self,
        *,
        class_id: int,
        student_code: str,
        student_name: Optional[str],
        event_date: date,
        timestamp: datetime,
        status: AttendanceStatus,
        method: CaptureMethod,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_events(
                        class_id, student_code, student_name, event_date, event_timestamp,
                        status, method, device_info, ip_address, latitude, longitude
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(class_id),
                        student_code,
                        student_name,
                        event_date,
                        timestamp,
                        status.value,
                        method.value,
                        device_info,
                        ip_address,
                        latitude,
                        longitude,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.Error as e:
            if is_duplicate_key(e):
                raise DuplicateError("Attendance for this student was already recorded today")
            raise

    def update(
        self,
        *,
        event_id: int,
        status: AttendanceStatus,
        method: CaptureMethod,
        student_name: Optional[str],
        device_info: Optional[str],
        ip_address: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_events
                SET status=%s, method=%s, student_name=%s, device_info=%s,
                    ip_address=%s, latitude=%s, longitude=%s
                WHERE event_id=%s
                """,
                (
                    status.value,
                    method.value,
                    student_name,
                    device_info,
                    ip_address,
                    latitude,
                    longitude,
                    int(event_id),
                ),
            )
            return cur.rowcount > 0

    def list_for_class(self, class_id: int, day: Optional[date] = None) -> Sequence[AttendanceEvent]:
        sql = f"SELECT {_COLUMNS} FROM attendance_events WHERE class_id=%s"
        params: list = [int(class_id)]
        if day is not None:
            sql += " AND event_date=%s"
            params.append(day)
        sql += " ORDER BY event_timestamp DESC, event_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_event(r) for r in fetchall(cur)]

    def list_for_student(
        self,
        student_code: str,
        *,
        class_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceEvent]:
        sql = f"SELECT {_COLUMNS} FROM attendance_events WHERE student_code=%s"
        params: list = [student_code]
        if class_id is not None:
            sql += " AND class_id=%s"
            params.append(int(class_id))
        if start is not None:
            sql += " AND event_timestamp >= %s"
            params.append(datetime.combine(start, datetime.min.time()))
        if end is not None:
            sql += " AND event_timestamp < %s"
            params.append(datetime.combine(end + timedelta(days=1), datetime.min.time()))
        sql += " ORDER BY event_timestamp DESC, event_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_event(r) for r in fetchall(cur)]

    def delete_for_student_in_class(self, class_id: int, student_code: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_events WHERE class_id=%s AND student_code=%s",
                (int(class_id), student_code),
            )
            return int(cur.rowcount)
