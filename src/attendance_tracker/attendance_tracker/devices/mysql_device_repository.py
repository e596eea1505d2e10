from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import DuplicateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import InstructorDevice, LocationFix
from .repository import DeviceRepository

_COLUMNS = """
    device_id, instructor_code, device_name, latitude, longitude, accuracy,
    location_at, active, created_at, updated_at
"""


def _to_device(r: dict) -> InstructorDevice:
    fix = None
    if r.get("latitude") is not None and r.get("longitude") is not None and r.get("location_at"):
        fix = LocationFix(
            latitude=float(r["latitude"]),
            longitude=float(r["longitude"]),
            accuracy=float(r.get("accuracy") or 0),
            timestamp=r["location_at"],
        )
    return InstructorDevice(
        device_id=r["device_id"],
        instructor_code=r["instructor_code"],
        device_name=r["device_name"],
        last_location=fix,
        active=bool(r["active"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, device_id: str) -> Optional[InstructorDevice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM instructor_devices WHERE device_id=%s", (device_id,))
            r = fetchone(cur)
            return _to_device(r) if r else None

    def create(self, *, device_id: str, instructor_code: str, device_name: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO instructor_devices(device_id, instructor_code, device_name) VALUES(%s,%s,%s)",
                    (device_id, instructor_code, device_name),
                )
        except mysql.connector.Error as e:
            if is_duplicate_key(e):
                raise DuplicateError("Device is already registered.")
            raise

    def set_location(
        self,
        *,
        device_id: str,
        instructor_code: str,
        latitude: float,
        longitude: float,
        accuracy: float,
        located_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE instructor_devices
                SET latitude=%s, longitude=%s, accuracy=%s, location_at=%s
                WHERE device_id=%s AND instructor_code=%s
                """,
                (latitude, longitude, accuracy, located_at, device_id, instructor_code),
            )
            return cur.rowcount > 0

    def list_for_instructor(self, instructor_code: str) -> Sequence[InstructorDevice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM instructor_devices WHERE instructor_code=%s ORDER BY created_at",
                (instructor_code,),
            )
            return [_to_device(r) for r in fetchall(cur)]

    def delete(self, device_id: str, instructor_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM instructor_devices WHERE device_id=%s AND instructor_code=%s",
                (device_id, instructor_code),
            )
            return cur.rowcount > 0

    def latest_active_fix(self, instructor_code: str) -> Optional[InstructorDevice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM instructor_devices
                WHERE instructor_code=%s AND active=1
                  AND latitude IS NOT NULL AND longitude IS NOT NULL AND location_at IS NOT NULL
                ORDER BY location_at DESC
                LIMIT 1
                """,
                (instructor_code,),
            )
            r = fetchone(cur)
            return _to_device(r) if r else None
