from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import parse_float, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DuplicateError, NotFoundError, ValidationError
from ..users.model import Account
from ..users.repository import AccountRepository
from .model import InstructorDevice, LocationFix
from .repository import DeviceRepository

logger = logging.getLogger(__name__)

_NOT_OWNED = "Device not found or not owned by this instructor."


class DeviceService:
    """Instructor devices and the last location fix each one reported."""

    def __init__(
        self,
        devices: DeviceRepository,
        accounts: AccountRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._devices = devices
        self._accounts = accounts
        self._clock = clock

    def register(self, instructor: Account, device_id: str, device_name: str) -> InstructorDevice:
        if instructor.role != Role.INSTRUCTOR:
            raise AuthorizationError("Forbidden. Only instructors can register devices.")
        device_id = require_non_empty(device_id, "deviceId")
        device_name = require_non_empty(device_name, "deviceName")
        if self._devices.get(device_id):
            raise DuplicateError("Device is already registered.")

        self._devices.create(device_id=device_id, instructor_code=instructor.user_code, device_name=device_name)
        logger.info("device %s registered for %s", device_id, instructor.user_code)
        return self._devices.get(device_id)

    def update_location(self, instructor: Account, device_id: str, latitude, longitude, accuracy=None) -> InstructorDevice:
        lat = parse_float(latitude, "latitude")
        lon = parse_float(longitude, "longitude")
        if lat is None or lon is None:
            raise ValidationError("latitude and longitude are required")
        if not -90 <= lat <= 90 or not -180 <= lon <= 180:
            raise ValidationError("latitude/longitude out of range")
        acc = parse_float(accuracy, "accuracy") or 0.0

        device = self._devices.get(device_id)
        if not device or device.instructor_code != instructor.user_code:
            raise NotFoundError(_NOT_OWNED)
        self._devices.set_location(
            device_id=device_id,
            instructor_code=instructor.user_code,
            latitude=lat,
            longitude=lon,
            accuracy=acc,
            located_at=self._clock(),
        )
        return self._devices.get(device_id)

    def list_mine(self, instructor: Account) -> Sequence[InstructorDevice]:
        return self._devices.list_for_instructor(instructor.user_code)

    def remove(self, instructor: Account, device_id: str) -> None:
        if not self._devices.delete(device_id, instructor.user_code):
            raise NotFoundError(_NOT_OWNED)
        logger.info("device %s removed by %s", device_id, instructor.user_code)

    def instructor_location(self, instructor_code: str) -> LocationFix:
        account = self._accounts.get_by_user_code(instructor_code)
        if not account or account.role != Role.INSTRUCTOR:
            raise NotFoundError("Instructor not found.")
        device = self._devices.latest_active_fix(instructor_code)
        if not device or not device.last_location:
            raise NotFoundError("No location data available for this instructor.")
        return device.last_location
