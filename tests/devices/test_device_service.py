from __future__ import annotations

from datetime import timedelta

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.core.exceptions import (
    AuthorizationError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from src.attendance_tracker.attendance_tracker.devices.service import DeviceService
from tests.fakes import InMemoryAccounts, InMemoryDevices


@pytest.fixture
def accounts():
    repo = InMemoryAccounts()
    repo.add(username="tina", role=Role.INSTRUCTOR, user_code="T-2024")
    repo.add(username="otto", role=Role.INSTRUCTOR, user_code="T-2025")
    repo.add(username="ana", role=Role.STUDENT, user_code="2024-0001")
    return repo


@pytest.fixture
def devices():
    return InMemoryDevices()


@pytest.fixture
def clock(fixed_now):
    times = {"now": fixed_now}
    return times


@pytest.fixture
def service(devices, accounts, clock):
    return DeviceService(devices, accounts, clock=lambda: clock["now"])


def test_register_and_list(service, accounts):
    tina = accounts.get_by_user_code("T-2024")

    device = service.register(tina, "phone-1", "Pixel")

    assert device.to_dict()["instructorId"] == "T-2024"
    assert [d.device_id for d in service.list_mine(tina)] == ["phone-1"]


def test_register_rejects_non_instructors_and_duplicates(service, accounts):
    with pytest.raises(AuthorizationError):
        service.register(accounts.get_by_user_code("2024-0001"), "phone-1", "Pixel")

    service.register(accounts.get_by_user_code("T-2024"), "phone-1", "Pixel")
    with pytest.raises(DuplicateError):
        service.register(accounts.get_by_user_code("T-2025"), "phone-1", "Other")


def test_location_updates_require_ownership(service, accounts, fixed_now):
    tina = accounts.get_by_user_code("T-2024")
    service.register(tina, "phone-1", "Pixel")

    updated = service.update_location(tina, "phone-1", "14.55", 121.02, 8)
    assert updated.last_location.latitude == 14.55
    assert updated.last_location.timestamp == fixed_now

    with pytest.raises(NotFoundError):
        service.update_location(accounts.get_by_user_code("T-2025"), "phone-1", 1, 1)


@pytest.mark.parametrize("lat, lon", [(None, 1), (91, 0), (0, 181), ("north", 0)])
def test_location_validation(service, accounts, lat, lon):
    tina = accounts.get_by_user_code("T-2024")
    service.register(tina, "phone-1", "Pixel")
    with pytest.raises(ValidationError):
        service.update_location(tina, "phone-1", lat, lon)


def test_instructor_location_uses_newest_fix(service, accounts, clock):
    tina = accounts.get_by_user_code("T-2024")
    service.register(tina, "phone-1", "Pixel")
    service.register(tina, "tablet-1", "Tab")
    service.update_location(tina, "phone-1", 10, 10)
    clock["now"] += timedelta(minutes=5)
    service.update_location(tina, "tablet-1", 20, 20)

    fix = service.instructor_location("T-2024")

    assert (fix.latitude, fix.longitude) == (20, 20)


def test_instructor_location_errors(service, accounts):
    with pytest.raises(NotFoundError, match="Instructor not found"):
        service.instructor_location("2024-0001")
    with pytest.raises(NotFoundError, match="No location data"):
        service.instructor_location("T-2024")


def test_remove_only_own_device(service, accounts):
    tina = accounts.get_by_user_code("T-2024")
    service.register(tina, "phone-1", "Pixel")

    with pytest.raises(NotFoundError):
        service.remove(accounts.get_by_user_code("T-2025"), "phone-1")
    service.remove(tina, "phone-1")
    assert service.list_mine(tina) == []
