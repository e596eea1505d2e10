from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, Optional, Tuple

from ..core.enums import Role
from .api import ApiClient, ApiError
from .navigation import shell_for

logger = logging.getLogger(__name__)


def load_admin_home(api: ApiClient) -> dict:
    return {
        "users": api.users.list(),
        "classes": api.classes.list(),
        "activity": api.logs.activity(),
    }


def load_instructor_home(api: ApiClient, today: date) -> dict:
    classes = api.classes.list()
    tallies = {}
    for c in classes:
        tallies[c["id"]] = api.attendance.for_class(c["id"], today.isoformat())["stats"]
    return {"classes": classes, "todayTally": tallies}


def load_student_home(api: ApiClient, student_code: str) -> dict:
    return {
        "todayClasses": api.students.today_classes(student_code),
        "overview": api.students.overview(student_code),
        "todayStatus": api.students.today_status(student_code),
    }


def load_home(api: ApiClient, user: dict, today: date) -> dict:
    """Home data for the signed-in ``user`` (the login response)."""

    role = Role(user["role"])
    if role == Role.ADMIN:
        data = load_admin_home(api)
    elif role == Role.INSTRUCTOR:
        data = load_instructor_home(api, today)
    else:
        data = load_student_home(api, user["userId"])
    return {"route": shell_for(role).route, **data}


class LocationReporter:
    """Pushes an instructor device's location fix to the API on an interval.

    ``read_fix`` returns ``(latitude, longitude, accuracy)`` or ``None`` when
    no fix is available yet.
    """

    def __init__(
        self,
        api: ApiClient,
        device_id: str,
        read_fix: Callable[[], Optional[Tuple[float, float, float]]],
        *,
        interval_seconds: float = 60.0,
    ):
        self._api = api
        self._device_id = device_id
        self._read_fix = read_fix
        self._interval = float(interval_seconds)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def report_once(self) -> bool:
        fix = self._read_fix()
        if fix is None:
            return False
        latitude, longitude, accuracy = fix
        try:
            self._api.devices.update_location(self._device_id, latitude, longitude, accuracy)
        except ApiError as e:
            logger.warning("location update failed (%s): %s", e.status, e.message)
            return False
        return True

    def _loop(self) -> None:
        while not self._stop.wait(self._interval):
            self.report_once()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="location-reporter", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None
