from __future__ import annotations

import json as jsonlib
from datetime import date

import pytest
import requests

from src.attendance_tracker.attendance_tracker.client.api import ApiClient, ApiError
from src.attendance_tracker.attendance_tracker.client.dashboard import LocationReporter, load_home
from src.attendance_tracker.attendance_tracker.client.navigation import route_for, shell_for

URLS = ("http://primary/api", "http://secondary/api")


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.content = jsonlib.dumps(payload).encode() if payload is not None else b""
        self.text = self.content.decode()
        self._payload = payload

    def json(self):
        return self._payload


class FakeSession:
    """Answers requests from a {(method, url): response-or-exception} table."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def request(self, method, url, *, json=None, params=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "params": params, "headers": headers})
        outcome = self.routes.get((method, url))
        if outcome is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_falls_back_to_next_url_and_remembers_it():
    session = FakeSession({("GET", "http://secondary/api/classes"): FakeResponse(200, [])})
    api = ApiClient(URLS, session=session)

    assert api.classes.list() == []
    assert api.base_url == "http://secondary/api"

    api.classes.list()
    assert session.calls[-1]["url"] == "http://secondary/api/classes"
    assert len(session.calls) == 3


def test_timeout_also_falls_back():
    session = FakeSession(
        {
            ("GET", "http://primary/api/auth/me"): requests.Timeout("slow"),
            ("GET", "http://secondary/api/auth/me"): FakeResponse(200, {"username": "ana"}),
        }
    )
    assert ApiClient(URLS, session=session).auth.me() == {"username": "ana"}


def test_http_errors_are_not_retried_elsewhere():
    session = FakeSession(
        {
            ("GET", "http://primary/api/users"): FakeResponse(401, {"message": "Token is not valid"}),
            ("GET", "http://secondary/api/users"): FakeResponse(200, []),
        }
    )
    api = ApiClient(URLS, session=session)

    with pytest.raises(ApiError) as exc:
        api.users.list()

    assert exc.value.status == 401
    assert exc.value.message == "Token is not valid"
    assert len(session.calls) == 1


def test_all_urls_down():
    api = ApiClient(URLS, session=FakeSession({}))
    with pytest.raises(ApiError) as exc:
        api.classes.list()
    assert exc.value.status == 0


def test_login_stores_token_and_logout_clears_it_even_on_failure():
    session = FakeSession(
        {
            ("POST", "http://primary/api/auth/login"): FakeResponse(200, {"role": "student", "token": "tok"}),
            ("POST", "http://primary/api/auth/logout"): FakeResponse(500, {"message": "Database error"}),
        }
    )
    api = ApiClient(URLS, session=session)

    api.auth.login("ana", "pw")
    assert api.token == "tok"

    with pytest.raises(ApiError):
        api.auth.logout()
    assert session.calls[-1]["headers"]["Authorization"] == "Bearer tok"
    assert api.token is None


def test_get_drops_empty_params():
    session = FakeSession({("GET", "http://primary/api/attendance/student/2024-0001"): FakeResponse(200, {})})
    ApiClient(URLS, session=session).attendance.for_student("2024-0001", start_date="2025-03-01")

    assert session.calls[0]["params"] == {"startDate": "2025-03-01"}


def test_navigation_shells():
    assert route_for("admin") == "Admin"
    assert shell_for("student").has_screen("QRScanner")
    assert shell_for("instructor").initial_screen == "Dashboard"
    with pytest.raises(ValueError, match="Unknown role"):
        shell_for("janitor")


def test_load_home_for_instructor_collects_tallies():
    stats = {"total": 1, "present": 1, "absent": 0, "late": 0}
    session = FakeSession(
        {
            ("GET", "http://primary/api/classes"): FakeResponse(200, [{"id": 7, "className": "DS"}]),
            ("GET", "http://primary/api/attendance/class/7"): FakeResponse(200, {"attendance": [], "stats": stats}),
        }
    )

    home = load_home(ApiClient(URLS, session=session), {"role": "instructor", "userId": "T-2024"}, date(2025, 3, 3))

    assert home["route"] == "Instructor"
    assert home["todayTally"] == {7: stats}
    assert session.calls[1]["params"] == {"date": "2025-03-03"}


def test_location_reporter_reports_and_tolerates_errors():
    session = FakeSession({("PUT", "http://primary/api/instructor-devices/location"): FakeResponse(200, {})})
    api = ApiClient(URLS, session=session)
    fixes = iter([None, (14.6, 121.0, 5.0)])
    reporter = LocationReporter(api, "phone-1", lambda: next(fixes), interval_seconds=3600)

    assert reporter.report_once() is False
    assert reporter.report_once() is True
    assert session.calls[0]["json"]["deviceId"] == "phone-1"

    session.routes[("PUT", "http://primary/api/instructor-devices/location")] = FakeResponse(
        404, {"message": "Device not found or not owned by this instructor."}
    )
    failing = LocationReporter(api, "phone-1", lambda: (1.0, 2.0, 0.0))
    assert failing.report_once() is False
