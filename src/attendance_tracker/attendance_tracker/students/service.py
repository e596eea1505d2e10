from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Sequence

from ..attendance.repository import AttendanceRepository
from ..classes.service import ClassService
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateError, NotFoundError, ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def _name_fields(data: Mapping[str, Any]) -> dict:
    return {
        "first_name": str(data.get("firstName") or data.get("first_name") or "").strip(),
        "last_name": str(data.get("lastName") or data.get("last_name") or "").strip(),
        "middle_initial": (str(data.get("middleInitial") or data.get("middle_initial") or "").strip() or None),
    }


class EnrollmentService:
    """Use case: class rosters and the student-facing dashboard queries."""

    def __init__(self, students: StudentRepository, classes: ClassService, attendance: AttendanceRepository):
        self._students = students
        self._classes = classes
        self._attendance = attendance

    def add(self, class_id: int, data: Mapping[str, Any]) -> Student:
        self._classes.get(class_id)

        student_code = str(data.get("studentId") or data.get("student_code") or "").strip()
        names = _name_fields(data)
        if not student_code or not names["first_name"] or not names["last_name"]:
            raise ValidationError("Missing required fields. Required: studentId, firstName, lastName")

        if self._students.get_enrollment(class_id, student_code):
            raise DuplicateError("Student is already enrolled in this class")

        self._students.upsert(student_code=student_code, account_id=data.get("accountId"), **names)
        self._students.add_enrollment(class_id, student_code)
        logger.info("student %s enrolled in class %s", student_code, class_id)
        return self._students.get(student_code)

    def list_for_class(self, class_id: int) -> Sequence[Student]:
        self._classes.get(class_id)
        return self._students.list_for_class(class_id)

    def update(self, class_id: int, student_code: str, data: Mapping[str, Any]) -> Student:
        current = self._require_enrolled(class_id, student_code)
        names = _name_fields(data)
        self._students.upsert(
            student_code=student_code,
            first_name=names["first_name"] or current.first_name,
            last_name=names["last_name"] or current.last_name,
            middle_initial=(
                names["middle_initial"]
                if "middleInitial" in data or "middle_initial" in data
                else current.middle_initial
            ),
            account_id=None,
        )
        return self._students.get(student_code)

    def remove(self, class_id: int, student_code: str) -> int:
        """Drop the enrollment and the student's attendance rows for this class only."""

        self._require_enrolled(class_id, student_code)
        self._students.remove_enrollment(class_id, student_code)
        removed = self._attendance.delete_for_student_in_class(class_id, student_code)
        logger.info("student %s removed from class %s (%d attendance rows)", student_code, class_id, removed)
        return removed

    def _require_enrolled(self, class_id: int, student_code: str) -> Student:
        if not self._students.get_enrollment(class_id, student_code):
            raise NotFoundError("Student not found in this class")
        student = self._students.get(student_code)
        if not student:
            raise NotFoundError("Student not found")
        return student

    # Student dashboard

    def _require_student(self, student_code: str) -> Student:
        student = self._students.get(student_code)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def today_classes(self, student_code: str, today: date):
        self._require_student(student_code)
        return self._classes.classes_meeting_on(self._students.class_ids_for(student_code), today)

    def attendance_overview(self, student_code: str) -> dict:
        counters = self._require_student(student_code).counters
        percentage = round(counters.present / counters.total * 100) if counters.total else 0
        return {**counters.to_dict(), "presentPercentage": percentage}

    def today_status(self, student_code: str, today: date) -> list[dict]:
        """Status per class meeting today; absent where nothing was recorded."""

        rows = []
        for school_class in self.today_classes(student_code, today):
            event = self._attendance.get_for_day(school_class.class_id, student_code, today)
            rows.append(
                {
                    "classId": school_class.class_id,
                    "className": school_class.class_name,
                    "subjectCode": school_class.subject_code,
                    "status": (event.status if event else AttendanceStatus.ABSENT).value,
                    "timestamp": event.timestamp.isoformat() if event else None,
                }
            )
        return rows
