from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class ReportEntry:
    student_code: str
    student_name: str
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {"studentId": self.student_code, "studentName": self.student_name, "status": self.status.value}


@dataclass(frozen=True)
class Report:
    """Saved per-class, per-day summary; independent of the live attendance events."""

    report_id: int
    report_date: date
    class_id: int
    class_name: str
    subject_code: str
    total_students: int
    present_count: int
    absent_count: int
    students: tuple[ReportEntry, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "date": self.report_date.isoformat(),
            "classId": self.class_id,
            "className": self.class_name,
            "subjectCode": self.subject_code,
            "totalStudents": self.total_students,
            "presentCount": self.present_count,
            "absentCount": self.absent_count,
            "students": [s.to_dict() for s in self.students],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
