from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for route guards."""

    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance outcome stored for one (class, student, day)."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class CaptureMethod(str, Enum):
    """How an attendance event was captured."""

    SCAN = "scan"
    MANUAL = "manual"
    LOCATION = "location"


class SessionAction(str, Enum):
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    TERMINATED = "terminated"


class Weekday(str, Enum):
    """Day codes used by class time slots (Monday..Saturday)."""

    MON = "M"
    TUE = "T"
    WED = "W"
    THU = "TH"
    FRI = "F"
    SAT = "S"

    @classmethod
    def from_date_weekday(cls, weekday: int) -> "Weekday | None":
        order = [cls.MON, cls.TUE, cls.WED, cls.THU, cls.FRI, cls.SAT]
        return order[weekday] if 0 <= weekday < len(order) else None


class Meridiem(str, Enum):
    AM = "AM"
    PM = "PM"
