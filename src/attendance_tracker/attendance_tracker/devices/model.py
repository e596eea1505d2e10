from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class LocationFix:
    latitude: float
    longitude: float
    accuracy: float
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class InstructorDevice:
    """A device an instructor registered for location sharing."""

    device_id: str
    instructor_code: str
    device_name: str
    last_location: Optional[LocationFix] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "deviceId": self.device_id,
            "instructorId": self.instructor_code,
            "deviceName": self.device_name,
            "lastLocation": self.last_location.to_dict() if self.last_location else None,
            "active": self.active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
