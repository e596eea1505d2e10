from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Report, ReportEntry


class ReportRepository(Protocol):
    def get_by_id(self, report_id: int) -> Optional[Report]:
        raise NotImplementedError

    def get_for_class_and_date(self, class_id: int, report_date: date) -> Optional[Report]:
        raise NotImplementedError

    def create(
        self,
        *,
        report_date: date,
        class_id: int,
        class_name: str,
        subject_code: str,
        total_students: int,
        present_count: int,
        absent_count: int,
        students: Sequence[ReportEntry],
    ) -> int:
        raise NotImplementedError

    def replace_contents(
        self,
        *,
        report_id: int,
        total_students: int,
        present_count: int,
        absent_count: int,
        students: Sequence[ReportEntry],
    ) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        class_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Report]:
        """Newest report date first."""

        raise NotImplementedError

    def delete(self, report_id: int) -> bool:
        raise NotImplementedError
