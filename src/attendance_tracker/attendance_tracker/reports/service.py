from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..classes.service import ClassService
from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_enum, require_fields
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import Report, ReportEntry
from .repository import ReportRepository

logger = logging.getLogger(__name__)

_REQUIRED = (
    "date",
    "classId",
    "className",
    "subjectCode",
    "totalStudents",
    "presentCount",
    "absentCount",
    "students",
)

# Late students attended, so they count towards presentCount.
_ATTENDED = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


def _parse_entries(raw) -> tuple[ReportEntry, ...]:
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("students must be a list")
    entries = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise ValidationError("students must be a list of objects")
        require_fields(item, ("studentId", "studentName", "status"))
        entries.append(
            ReportEntry(
                student_code=str(item["studentId"]),
                student_name=str(item["studentName"]),
                status=parse_enum(AttendanceStatus, item["status"], "status"),
            )
        )
    return tuple(entries)


def _parse_count(value, field_name: str) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if count < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return count


class ReportService:
    def __init__(
        self,
        reports: ReportRepository,
        classes: ClassService,
        students: StudentRepository,
        attendance: AttendanceRepository,
    ):
        self._reports = reports
        self._classes = classes
        self._students = students
        self._attendance = attendance

    def save(self, data: Mapping[str, Any]) -> tuple[Report, bool]:
        """Create the (class, date) report or replace its counts and roster.

        Returns the stored report and whether it was newly created.
        """

        require_fields(data, _REQUIRED)
        try:
            report_date = parse_iso_date(str(data["date"])[:10])
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")
        class_id = _parse_count(data["classId"], "classId")
        entries = _parse_entries(data["students"])
        counts = {
            "total_students": _parse_count(data["totalStudents"], "totalStudents"),
            "present_count": _parse_count(data["presentCount"], "presentCount"),
            "absent_count": _parse_count(data["absentCount"], "absentCount"),
        }
        return self._upsert(
            report_date=report_date,
            class_id=class_id,
            class_name=str(data["className"]),
            subject_code=str(data["subjectCode"]),
            students=entries,
            **counts,
        )

    def _upsert(self, *, report_date: date, class_id: int, class_name: str, subject_code: str, **contents):
        existing = self._reports.get_for_class_and_date(class_id, report_date)
        if existing:
            self._reports.replace_contents(report_id=existing.report_id, **contents)
            logger.info("report %s updated (class %s, %s)", existing.report_id, class_id, report_date)
            return self._reports.get_by_id(existing.report_id), False

        report_id = self._reports.create(
            report_date=report_date,
            class_id=class_id,
            class_name=class_name,
            subject_code=subject_code,
            **contents,
        )
        logger.info("report %s saved (class %s, %s)", report_id, class_id, report_date)
        return self._reports.get_by_id(report_id), True

    def snapshot_from_events(self, class_id: int, day: date) -> tuple[Report, bool]:
        """Save a report built from the current roster and the day's events.

        Enrolled students without an event for the day are listed as absent.
        """

        school_class = self._classes.get(class_id)
        statuses = {e.student_code: e.status for e in self._attendance.list_for_class(class_id, day)}
        entries = tuple(
            ReportEntry(
                student_code=s.student_code,
                student_name=s.display_name,
                status=statuses.get(s.student_code, AttendanceStatus.ABSENT),
            )
            for s in self._students.list_for_class(class_id)
        )
        present = sum(1 for e in entries if e.status in _ATTENDED)
        return self._upsert(
            report_date=day,
            class_id=school_class.class_id,
            class_name=school_class.class_name,
            subject_code=school_class.subject_code,
            total_students=len(entries),
            present_count=present,
            absent_count=len(entries) - present,
            students=entries,
        )

    def list_for_class(self, class_id: int, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Report]:
        return self._reports.list(class_id=class_id, start=start, end=end)

    def list_all(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Report]:
        return self._reports.list(start=start, end=end)

    def delete(self, report_id: int) -> None:
        if not self._reports.delete(report_id):
            raise NotFoundError("Report not found")
        logger.info("report %s deleted", report_id)
