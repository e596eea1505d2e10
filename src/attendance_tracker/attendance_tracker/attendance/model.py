from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import AttendanceStatus, CaptureMethod
from ..students.model import StudentCounters


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one student's attendance in one class on one day."""

    event_id: int
    class_id: int
    student_code: str
    event_date: date
    timestamp: datetime
    status: AttendanceStatus
    method: CaptureMethod
    student_name: Optional[str] = None
    device_info: Optional[str] = None
    ip_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def location(self) -> Optional[dict]:
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "classId": self.class_id,
            "studentId": self.student_code,
            "studentName": self.student_name,
            "date": self.event_date.isoformat(),
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "recordedVia": self.method.value,
            "deviceInfo": self.device_info,
            "ipAddress": self.ip_address,
            "location": self.location,
        }


@dataclass(frozen=True)
class AttendanceStats:
    """Counts by status over a set of events."""

    present: int = 0
    absent: int = 0
    late: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late

    @property
    def present_percentage(self) -> int:
        if not self.total:
            return 0
        return round(self.present / self.total * 100)

    @classmethod
    def from_statuses(cls, statuses: Iterable[AttendanceStatus]) -> "AttendanceStats":
        counts = {s: 0 for s in AttendanceStatus}
        for s in statuses:
            counts[s] += 1
        return cls(
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            late=counts[AttendanceStatus.LATE],
        )

    def to_dict(self, *, with_percentage: bool = False) -> dict:
        out = {"total": self.total, "present": self.present, "absent": self.absent, "late": self.late}
        if with_percentage:
            out["presentPercentage"] = self.present_percentage
        return out


@dataclass(frozen=True)
class RecordResult:
    event: AttendanceEvent
    created: bool
    tally: AttendanceStats
    counters: StudentCounters

    @property
    def message(self) -> str:
        return "Attendance recorded successfully" if self.created else "Attendance record updated"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "attendance": self.event.to_dict(),
            "tally": self.tally.to_dict(),
            "counters": self.counters.to_dict(),
        }
