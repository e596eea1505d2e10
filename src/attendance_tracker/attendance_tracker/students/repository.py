from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import Enrollment, Student, StudentCounters


class StudentRepository(Protocol):
    def get(self, student_code: str) -> Optional[Student]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        student_code: str,
        first_name: str,
        last_name: str,
        middle_initial: Optional[str],
        account_id: Optional[int],
    ) -> None:
        """Create the student or refresh its names; counters are left untouched."""

        raise NotImplementedError

    def get_enrollment(self, class_id: int, student_code: str) -> Optional[Enrollment]:
        raise NotImplementedError

    def add_enrollment(self, class_id: int, student_code: str) -> int:
        """Raises DuplicateError when the (class, student) pair already exists."""

        raise NotImplementedError

    def remove_enrollment(self, class_id: int, student_code: str) -> bool:
        raise NotImplementedError

    def list_for_class(self, class_id: int) -> Sequence[Student]:
        raise NotImplementedError

    def class_ids_for(self, student_code: str) -> Sequence[int]:
        raise NotImplementedError

    def adjust_counters(
        self,
        student_code: str,
        *,
        decrement: Optional[AttendanceStatus] = None,
        increment: Optional[AttendanceStatus] = None,
    ) -> None:
        raise NotImplementedError

    def get_counters(self, student_code: str) -> StudentCounters:
        raise NotImplementedError
