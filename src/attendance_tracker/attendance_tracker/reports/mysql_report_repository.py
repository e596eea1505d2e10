from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import Report, ReportEntry
from .repository import ReportRepository

_COLUMNS = """
    report_id, report_date, class_id, class_name, subject_code, total_students,
    present_count, absent_count, students, created_at, updated_at
"""


def _entries_to_json(students: Sequence[ReportEntry]) -> str:
    return to_json([s.to_dict() for s in students])


def _to_report(r: dict) -> Report:
    entries = tuple(
        ReportEntry(
            student_code=s["studentId"],
            student_name=s.get("studentName") or "",
            status=AttendanceStatus(s["status"]),
        )
        for s in from_json(r.get("students"), [])
    )
    return Report(
        report_id=int(r["report_id"]),
        report_date=r["report_date"],
        class_id=int(r["class_id"]),
        class_name=r["class_name"],
        subject_code=r["subject_code"],
        total_students=int(r["total_students"]),
        present_count=int(r["present_count"]),
        absent_count=int(r["absent_count"]),
        students=entries,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, report_id: int) -> Optional[Report]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM reports WHERE report_id=%s", (int(report_id),))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def get_for_class_and_date(self, class_id: int, report_date: date) -> Optional[Report]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM reports WHERE class_id=%s AND report_date=%s ORDER BY report_id LIMIT 1",
                (int(class_id), report_date),
            )
            r = fetchone(cur)
            return _to_report(r) if r else None

    def create(
        self,
        *,
        report_date: date,
        class_id: int,
        class_name: str,
        subject_code: str,
        total_students: int,
        present_count: int,
        absent_count: int,
        students: Sequence[ReportEntry],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reports(
                    report_date, class_id, class_name, subject_code,
                    total_students, present_count, absent_count, students
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    report_date,
                    int(class_id),
                    class_name,
                    subject_code,
                    int(total_students),
                    int(present_count),
                    int(absent_count),
                    _entries_to_json(students),
                ),
            )
            return int(cur.lastrowid)

    def replace_contents(
        self,
        *,
        report_id: int,
        total_students: int,
        present_count: int,
        absent_count: int,
        students: Sequence[ReportEntry],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE reports
                SET total_students=%s, present_count=%s, absent_count=%s, students=%s
                WHERE report_id=%s
                """,
                (int(total_students), int(present_count), int(absent_count), _entries_to_json(students), int(report_id)),
            )
            return cur.rowcount > 0

    def list(
        self,
        *,
        class_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Report]:
        sql = f"SELECT {_COLUMNS} FROM reports WHERE 1=1"
        params: list = []
        if class_id is not None:
            sql += " AND class_id=%s"
            params.append(int(class_id))
        if start is not None:
            sql += " AND report_date >= %s"
            params.append(start)
        if end is not None:
            sql += " AND report_date <= %s"
            params.append(end)
        sql += " ORDER BY report_date DESC, report_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_report(r) for r in fetchall(cur)]

    def delete(self, report_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM reports WHERE report_id=%s", (int(report_id),))
            return cur.rowcount > 0
