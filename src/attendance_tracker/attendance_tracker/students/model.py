from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StudentCounters:
    """Running per-status totals kept on the student record."""

    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late

    def get(self, status: AttendanceStatus) -> int:
        return getattr(self, status.value)

    def to_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "late": self.late, "total": self.total}


@dataclass(frozen=True)
class Student:
    """Domain entity: a student keyed by business ID (e.g. 2024-0001)."""

    student_code: str
    first_name: str
    last_name: str
    middle_initial: Optional[str] = None
    account_id: Optional[int] = None
    counters: StudentCounters = StudentCounters()

    @property
    def display_name(self) -> str:
        middle = f" {self.middle_initial}." if self.middle_initial else ""
        return f"{self.last_name}, {self.first_name}{middle}"

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_code,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "middleInitial": self.middle_initial,
            "displayName": self.display_name,
            "accountId": self.account_id,
            "counters": self.counters.to_dict(),
        }


@dataclass(frozen=True)
class Enrollment:
    enrollment_id: int
    class_id: int
    student_code: str
