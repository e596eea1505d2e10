from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import InstructorDevice


class DeviceRepository(Protocol):
    def get(self, device_id: str) -> Optional[InstructorDevice]:
        raise NotImplementedError

    def create(self, *, device_id: str, instructor_code: str, device_name: str) -> None:
        """Raises DuplicateError when the device id is taken."""

        raise NotImplementedError

    def set_location(
        self,
        *,
        device_id: str,
        instructor_code: str,
        latitude: float,
        longitude: float,
        accuracy: float,
        located_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def list_for_instructor(self, instructor_code: str) -> Sequence[InstructorDevice]:
        raise NotImplementedError

    def delete(self, device_id: str, instructor_code: str) -> bool:
        raise NotImplementedError

    def latest_active_fix(self, instructor_code: str) -> Optional[InstructorDevice]:
        """Active device with the newest location fix, if any."""

        raise NotImplementedError
