from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Enrollment, Student, StudentCounters
from .repository import StudentRepository

_COLUMNS = "s.student_code, s.first_name, s.last_name, s.middle_initial, s.account_id, s.present_count, s.absent_count, s.late_count"

_COUNTER_COLUMNS = {
    AttendanceStatus.PRESENT: "present_count",
    AttendanceStatus.ABSENT: "absent_count",
    AttendanceStatus.LATE: "late_count",
}


def _to_student(r: dict) -> Student:
    return Student(
        student_code=r["student_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        middle_initial=r.get("middle_initial"),
        account_id=r.get("account_id"),
        counters=StudentCounters(
            present=int(r.get("present_count") or 0),
            absent=int(r.get("absent_count") or 0),
            late=int(r.get("late_count") or 0),
        ),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, student_code: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students s WHERE s.student_code=%s", (student_code,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def upsert(
        self,
        *,
        student_code: str,
        first_name: str,
        last_name: str,
        middle_initial: Optional[str],
        account_id: Optional[int],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(student_code, first_name, last_name, middle_initial, account_id)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    first_name=VALUES(first_name),
                    last_name=VALUES(last_name),
                    middle_initial=VALUES(middle_initial),
                    account_id=COALESCE(VALUES(account_id), account_id)
                """,
                (student_code, first_name, last_name, middle_initial, account_id),
            )

    def get_enrollment(self, class_id: int, student_code: str) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT enrollment_id, class_id, student_code FROM enrollments WHERE class_id=%s AND student_code=%s",
                (int(class_id), student_code),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Enrollment(enrollment_id=int(r["enrollment_id"]), class_id=int(r["class_id"]), student_code=r["student_code"])

    def add_enrollment(self, class_id: int, student_code: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO enrollments(class_id, student_code) VALUES(%s,%s)",
                    (int(class_id), student_code),
                )
                return int(cur.lastrowid)
        except mysql.connector.Error as e:
            if is_duplicate_key(e):
                raise DuplicateError("Student is already enrolled in this class")
            raise

    def remove_enrollment(self, class_id: int, student_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM enrollments WHERE class_id=%s AND student_code=%s",
                (int(class_id), student_code),
            )
            return cur.rowcount > 0

    def list_for_class(self, class_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM enrollments e
                JOIN students s ON s.student_code = e.student_code
                WHERE e.class_id=%s
                ORDER BY s.last_name, s.first_name
                """,
                (int(class_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def class_ids_for(self, student_code: str) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_id FROM enrollments WHERE student_code=%s ORDER BY class_id", (student_code,))
            return [int(r["class_id"]) for r in fetchall(cur)]

    def adjust_counters(
        self,
        student_code: str,
        *,
        decrement: Optional[AttendanceStatus] = None,
        increment: Optional[AttendanceStatus] = None,
    ) -> None:
        sets: list[str] = []
        if decrement is not None:
            col = _COUNTER_COLUMNS[decrement]
            sets.append(f"{col}=GREATEST({col}-1, 0)")
        if increment is not None:
            col = _COUNTER_COLUMNS[increment]
            sets.append(f"{col}={col}+1")
        if not sets:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE students SET {', '.join(sets)} WHERE student_code=%s", (student_code,))

    def get_counters(self, student_code: str) -> StudentCounters:
        student = self.get(student_code)
        return student.counters if student else StudentCounters()
