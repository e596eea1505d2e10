from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..classes.repository import ClassRepository
from ..common.datetime_utils import day_bounds, now_local
from ..core.enums import AttendanceStatus, CaptureMethod
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import AttendanceEvent, AttendanceStats, RecordResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceRecorder:
    """Records at most one attendance event per (class, student, day).

    A second submission on the same day updates the stored event in place and
    moves the student's per-status counter from the old status to the new one.
    The event write and the counter adjustment are separate store calls.
    """

    def __init__(
        self,
        events: AttendanceRepository,
        classes: ClassRepository,
        students: StudentRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._classes = classes
        self._students = students
        self._clock = clock

    def _require_class(self, class_id: int):
        found = self._classes.get_by_id(class_id)
        if not found:
            raise NotFoundError("Class not found")
        return found

    def _require_enrollment(self, class_id: int, student_code: str) -> None:
        if not self._students.get_enrollment(class_id, student_code):
            raise NotFoundError(
                "Student not found in this class",
                details=(
                    f"No student with ID {student_code} found in class {class_id}. "
                    "Verify that the student is properly enrolled in this specific class."
                ),
            )

    def _default_name(self, student_code: str) -> Optional[str]:
        student = self._students.get(student_code)
        return student.display_name if student else None

    def record(
        self,
        class_id: int,
        student_code: str,
        *,
        status: Optional[AttendanceStatus] = None,
        timestamp: Optional[datetime] = None,
        method: Optional[CaptureMethod] = None,
        student_name: Optional[str] = None,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
        location: Optional[tuple[float, float]] = None,
    ) -> RecordResult:
        self._require_class(class_id)
        self._require_enrollment(class_id, student_code)

        when = timestamp or self._clock()
        day = when.date()
        latitude, longitude = location if location else (None, None)

        existing = self._events.get_for_day(class_id, student_code, day)
        if existing:
            new_status = status or existing.status
            self._events.update(
                event_id=existing.event_id,
                status=new_status,
                method=method or existing.method,
                student_name=student_name or existing.student_name,
                device_info=device_info or existing.device_info,
                ip_address=ip_address or existing.ip_address,
                latitude=latitude if location else existing.latitude,
                longitude=longitude if location else existing.longitude,
            )
            if new_status != existing.status:
                self._students.adjust_counters(student_code, decrement=existing.status, increment=new_status)
                logger.info(
                    "counters for %s moved %s -> %s", student_code, existing.status.value, new_status.value
                )
            event = self._events.get_by_id(existing.event_id) or existing
            created = False
            logger.info("attendance updated: class=%s student=%s day=%s", class_id, student_code, day)
        else:
            new_status = status or AttendanceStatus.PRESENT
            event_id = self._events.create(
                class_id=class_id,
                student_code=student_code,
                student_name=student_name or self._default_name(student_code),
                event_date=day,
                timestamp=when,
                status=new_status,
                method=method or CaptureMethod.SCAN,
                device_info=device_info,
                ip_address=ip_address,
                latitude=latitude,
                longitude=longitude,
            )
            self._students.adjust_counters(student_code, increment=new_status)
            event = self._events.get_by_id(event_id)
            created = True
            logger.info("attendance recorded: class=%s student=%s day=%s", class_id, student_code, day)

        return RecordResult(
            event=event,
            created=created,
            tally=self.tally(class_id, day),
            counters=self._students.get_counters(student_code),
        )

    def tally(self, class_id: int, day: date) -> AttendanceStats:
        return AttendanceStats.from_statuses(e.status for e in self._events.list_for_class(class_id, day))

    def bulk_update(
        self,
        class_id: int,
        records: Sequence[Mapping[str, Any]],
        *,
        day: Optional[date] = None,
    ) -> dict:
        self._require_class(class_id)
        when = day_bounds(day)[0] if day else self._clock()

        results = []
        for raw in records:
            if not isinstance(raw, Mapping):
                results.append({"studentId": None, "success": False, "message": "Invalid record data"})
                continue
            student_code = raw.get("studentId") or raw.get("student_code")
            status_value = raw.get("status")
            if not student_code or not status_value:
                results.append({"studentId": student_code, "success": False, "message": "Invalid record data"})
                continue
            try:
                status = AttendanceStatus(status_value)
            except ValueError:
                results.append({"studentId": student_code, "success": False, "message": "Invalid status"})
                continue
            try:
                outcome = self.record(
                    class_id, student_code, status=status, timestamp=when, method=CaptureMethod.MANUAL
                )
            except DomainError as e:
                results.append({"studentId": student_code, "success": False, "message": str(e)})
                continue
            except Exception:
                logger.exception("bulk attendance failed for %s in class %s", student_code, class_id)
                results.append({"studentId": student_code, "success": False, "message": "Processing error"})
                continue
            message = "Attendance recorded" if outcome.created else "Attendance updated"
            results.append({"studentId": student_code, "success": True, "message": message})

        successful = sum(1 for r in results if r["success"])
        return {
            "message": "Bulk attendance update processed",
            "results": results,
            "summary": {"total": len(results), "successful": successful, "failed": len(results) - successful},
        }

    def by_class(self, class_id: int, day: Optional[date] = None) -> tuple[Sequence[AttendanceEvent], AttendanceStats]:
        events = self._events.list_for_class(class_id, day)
        return events, AttendanceStats.from_statuses(e.status for e in events)

    def by_student(
        self,
        student_code: str,
        *,
        class_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> tuple[Sequence[AttendanceEvent], AttendanceStats]:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        events = self._events.list_for_student(student_code, class_id=class_id, start=start, end=end)
        return events, AttendanceStats.from_statuses(e.status for e in events)

    def status_for(self, class_id: int, student_code: str, day: Optional[date] = None) -> AttendanceStatus:
        """Stored status for the day, or absent when nothing was recorded."""

        event = self._events.get_for_day(class_id, student_code, day or self._clock().date())
        return event.status if event else AttendanceStatus.ABSENT

    def find_for_day(self, class_id: int, student_code: str, day: date) -> Optional[AttendanceEvent]:
        return self._events.get_for_day(class_id, student_code, day)
