from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import SchoolClass, TimeSlot
from .repository import ClassRepository

_COLUMNS = """
    class_id, class_name, subject_code, course, room, year_section, schedules,
    instructor_code, created_at, updated_at
"""


def _to_class(r: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(r["class_id"]),
        class_name=r["class_name"],
        subject_code=r["subject_code"],
        course=r["course"],
        room=r["room"],
        year_section=r["year_section"],
        schedules=tuple(TimeSlot.from_dict(s) for s in from_json(r.get("schedules"), [])),
        instructor_code=r.get("instructor_code"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes ORDER BY created_at DESC, class_id DESC")
            return [_to_class(r) for r in fetchall(cur)]

    def list_for_instructor(self, instructor_code: str) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM classes WHERE instructor_code=%s ORDER BY class_name",
                (instructor_code,),
            )
            return [_to_class(r) for r in fetchall(cur)]

    def list_by_ids(self, class_ids: Sequence[int]) -> Sequence[SchoolClass]:
        ids = [int(i) for i in class_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM classes WHERE class_id IN ({placeholders}) ORDER BY class_name",
                tuple(ids),
            )
            return [_to_class(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        class_name: str,
        subject_code: str,
        course: str,
        room: str,
        year_section: str,
        schedules: Sequence[TimeSlot],
        instructor_code: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO classes(class_name, subject_code, course, room, year_section, schedules, instructor_code)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    class_name, subject_code, course, room, year_section,
                    to_json([s.to_dict() for s in schedules]), instructor_code,
                ),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        class_id: int,
        class_name: str,
        subject_code: str,
        course: str,
        room: str,
        year_section: str,
        schedules: Sequence[TimeSlot],
        instructor_code: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE classes
                SET class_name=%s, subject_code=%s, course=%s, room=%s, year_section=%s,
                    schedules=%s, instructor_code=%s
                WHERE class_id=%s
                """,
                (
                    class_name, subject_code, course, room, year_section,
                    to_json([s.to_dict() for s in schedules]), instructor_code, int(class_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE class_id=%s", (int(class_id),))
            return cur.rowcount > 0
