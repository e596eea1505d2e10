from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass, TimeSlot


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SchoolClass]:
        """Newest first."""

        raise NotImplementedError

    def list_for_instructor(self, instructor_code: str) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def list_by_ids(self, class_ids: Sequence[int]) -> Sequence[SchoolClass]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        raise NotImplementedError

    def delete(self, class_id: int) -> bool:
        raise NotImplementedError
