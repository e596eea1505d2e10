from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, CaptureMethod
from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def get_for_day(self, class_id: int, student_code: str, day: date) -> Optional[AttendanceEvent]:
        raise NotImplementedError

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
        """Insert one event; raises DuplicateError when the day already has one."""

        raise NotImplementedError

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
        raise NotImplementedError

    def list_for_class(self, class_id: int, day: Optional[date] = None) -> Sequence[AttendanceEvent]:
        """Newest first."""

        raise NotImplementedError

    def list_for_student(
        self,
        student_code: str,
        *,
        class_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def delete_for_student_in_class(self, class_id: int, student_code: str) -> int:
        raise NotImplementedError
