from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.enums import Meridiem, Weekday
from ..core.exceptions import ValidationError

_CLOCK_RE = re.compile(r"^(1[0-2]|0?[1-9]):[0-5]\d$")


@dataclass(frozen=True)
class TimeSlot:
    """A weekly meeting slot: a set of days plus 12-hour start/end times."""

    days: tuple[Weekday, ...]
    start_time: str
    start_period: Meridiem
    end_time: str
    end_period: Meridiem

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimeSlot":
        days_raw = data.get("days") or []
        if isinstance(days_raw, str):
            days_raw = [days_raw]
        try:
            days = tuple(dict.fromkeys(Weekday(str(d).strip().upper()) for d in days_raw))
            start_period = Meridiem(str(data.get("start_period", data.get("startPeriod", ""))).upper())
            end_period = Meridiem(str(data.get("end_period", data.get("endPeriod", ""))).upper())
        except ValueError:
            raise ValidationError("Invalid time slot: days must be M/T/W/TH/F/S and periods AM/PM")
        if not days:
            raise ValidationError("Invalid time slot: at least one day is required")

        start_time = str(data.get("start_time", data.get("startTime", ""))).strip()
        end_time = str(data.get("end_time", data.get("endTime", ""))).strip()
        if not _CLOCK_RE.match(start_time) or not _CLOCK_RE.match(end_time):
            raise ValidationError("Invalid time slot: times must look like H:MM")

        return cls(
            days=days,
            start_time=start_time,
            start_period=start_period,
            end_time=end_time,
            end_period=end_period,
        )

    def to_dict(self) -> dict:
        return {
            "days": [d.value for d in self.days],
            "start_time": self.start_time,
            "start_period": self.start_period.value,
            "end_time": self.end_time,
            "end_period": self.end_period.value,
        }

    def meets_on(self, day: Weekday) -> bool:
        return day in self.days


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class section with its weekly schedule."""

    class_id: int
    class_name: str
    subject_code: str
    course: str
    room: str
    year_section: str
    schedules: tuple[TimeSlot, ...] = field(default_factory=tuple)
    instructor_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def meets_on(self, day: Weekday) -> bool:
        return any(slot.meets_on(day) for slot in self.schedules)

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "className": self.class_name,
            "subjectCode": self.subject_code,
            "course": self.course,
            "room": self.room,
            "yearSection": self.year_section,
            "schedules": [s.to_dict() for s in self.schedules],
            "instructorId": self.instructor_code,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
