from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URLS = (
    "http://localhost:5000/api",
    "http://127.0.0.1:5000/api",
    "https://localhost:5000/api",
)


class ApiError(Exception):
    """Non-2xx response from the API (or every base URL unreachable, status 0)."""

    def __init__(self, status: int, message: str, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.payload = payload


class ApiClient:
    """HTTP client for the attendance API holding the bearer token.

    Connection failures and timeouts fall through to the next base URL; the
    first URL that answers becomes the preferred one. HTTP error responses
    (401/403 included) are never retried elsewhere.
    """

    def __init__(
        self,
        base_urls: Sequence[str] = DEFAULT_BASE_URLS,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        if not base_urls:
            raise ValueError("at least one base URL is required")
        self._base_urls = [u.rstrip("/") for u in base_urls]
        self._preferred = 0
        self._session = session or requests.Session()
        self._timeout = timeout
        self.token: Optional[str] = None

        self.auth = AuthApi(self)
        self.users = UsersApi(self)
        self.classes = ClassesApi(self)
        self.students = StudentsApi(self)
        self.attendance = AttendanceApi(self)
        self.qr = QrApi(self)
        self.reports = ReportsApi(self)
        self.devices = DevicesApi(self)
        self.logs = LogsApi(self)

    @property
    def base_url(self) -> str:
        return self._base_urls[self._preferred]

    def _candidates(self) -> list[int]:
        order = list(range(len(self._base_urls)))
        return order[self._preferred:] + order[: self._preferred]

    def request(self, method: str, path: str, *, json: Any = None, params: Optional[dict] = None) -> Any:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        last_error: Optional[Exception] = None
        for index in self._candidates():
            url = f"{self._base_urls[index]}/{path.lstrip('/')}"
            try:
                resp = self._session.request(
                    method, url, json=json, params=params, headers=headers, timeout=self._timeout
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                logger.warning("API unreachable at %s: %s", self._base_urls[index], e)
                last_error = e
                continue
            if index != self._preferred:
                logger.info("switching API base URL to %s", self._base_urls[index])
                self._preferred = index
            return self._decode(resp)

        raise ApiError(0, f"Unable to reach the server: {last_error}")

    @staticmethod
    def _decode(resp: requests.Response) -> Any:
        try:
            payload = resp.json() if resp.content else None
        except ValueError:
            payload = resp.text
        if resp.status_code >= 400:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiError(resp.status_code, message or f"HTTP {resp.status_code}", payload)
        return payload

    def get(self, path: str, **params) -> Any:
        return self.request("GET", path, params={k: v for k, v in params.items() if v is not None} or None)

    def post(self, path: str, body: Any = None) -> Any:
        return self.request("POST", path, json=body if body is not None else {})

    def put(self, path: str, body: Any = None) -> Any:
        return self.request("PUT", path, json=body if body is not None else {})

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)


class _Resource:
    def __init__(self, client: ApiClient):
        self._client = client


class AuthApi(_Resource):
    def login(self, username: str, password: str) -> dict:
        user = self._client.post("/auth/login", {"username": username, "password": password})
        self._client.token = user.get("token")
        return user

    def me(self) -> dict:
        return self._client.get("/auth/me")

    def logout(self) -> None:
        try:
            self._client.post("/auth/logout")
        finally:
            self._client.token = None

    def change_password(self, current_password: str, new_password: str) -> dict:
        return self._client.post(
            "/auth/change-password", {"currentPassword": current_password, "newPassword": new_password}
        )


class UsersApi(_Resource):
    def list(self) -> list:
        return self._client.get("/users")

    def get(self, account_id: int) -> dict:
        return self._client.get(f"/users/{account_id}")

    def create(self, *, username: str, email: str, role: str, user_code: str) -> dict:
        return self._client.post("/users", {"username": username, "email": email, "role": role, "userId": user_code})

    def update(self, account_id: int, **fields) -> dict:
        return self._client.put(f"/users/{account_id}", fields)

    def delete(self, account_id: int) -> dict:
        return self._client.delete(f"/users/{account_id}")


class ClassesApi(_Resource):
    def list(self) -> list:
        return self._client.get("/classes")

    def get(self, class_id: int) -> dict:
        return self._client.get(f"/classes/{class_id}")

    def create(self, data: dict) -> dict:
        return self._client.post("/classes", data)

    def update(self, class_id: int, data: dict) -> dict:
        return self._client.put(f"/classes/{class_id}", data)

    def delete(self, class_id: int) -> dict:
        return self._client.delete(f"/classes/{class_id}")


class StudentsApi(_Resource):
    def for_class(self, class_id: int) -> list:
        return self._client.get(f"/students/{class_id}")

    def add(self, class_id: int, student_code: str, first_name: str, last_name: str, middle_initial=None) -> dict:
        return self._client.post(
            "/students",
            {
                "classId": class_id,
                "studentId": student_code,
                "firstName": first_name,
                "lastName": last_name,
                "middleInitial": middle_initial,
            },
        )

    def update(self, class_id: int, student_code: str, data: dict) -> dict:
        return self._client.put(f"/students/{class_id}/{student_code}", data)

    def remove(self, class_id: int, student_code: str) -> dict:
        return self._client.delete(f"/students/{class_id}/{student_code}")

    def today_classes(self, student_code: str) -> list:
        return self._client.get(f"/students/{student_code}/classes/today")

    def overview(self, student_code: str) -> dict:
        return self._client.get(f"/students/{student_code}/attendance/overview")

    def today_status(self, student_code: str) -> list:
        return self._client.get(f"/students/{student_code}/attendance/today")


class AttendanceApi(_Resource):
    def submit(self, class_id: int, student_code: str, **fields) -> dict:
        return self._client.post("/attendance", {"classId": class_id, "studentId": student_code, **fields})

    def bulk(self, class_id: int, records: list, day: Optional[str] = None) -> dict:
        body = {"classId": class_id, "records": records}
        if day:
            body["date"] = day
        return self._client.post("/attendance/bulk", body)

    def for_class(self, class_id: int, day: Optional[str] = None) -> dict:
        return self._client.get(f"/attendance/class/{class_id}", date=day)

    def for_student(self, student_code: str, *, class_id=None, start_date=None, end_date=None) -> dict:
        return self._client.get(
            f"/attendance/student/{student_code}", classId=class_id, startDate=start_date, endDate=end_date
        )

    def status(self, class_id: int, student_code: str, day: Optional[str] = None) -> str:
        return self._client.get(f"/attendance/status/{class_id}/{student_code}", date=day)["status"]


class QrApi(_Resource):
    def generate(self, class_id: int) -> dict:
        return self._client.post("/qr/generate", {"classId": class_id})

    def validate(self, token: str) -> dict:
        return self._client.post("/qr/validate", {"token": token})

    def mark(self, class_id: int, student_code: str, timestamp: str) -> dict:
        return self._client.post("/qr/mark", {"classId": class_id, "studentId": student_code, "timestamp": timestamp})


class ReportsApi(_Resource):
    def save(self, report: dict) -> dict:
        return self._client.post("/reports", report)

    def snapshot(self, class_id: int, day: Optional[str] = None) -> dict:
        return self._client.post("/reports/snapshot", {"classId": class_id, "date": day})

    def list(self, *, start_date=None, end_date=None) -> list:
        return self._client.get("/reports", startDate=start_date, endDate=end_date)

    def for_class(self, class_id: int, *, start_date=None, end_date=None) -> list:
        return self._client.get(f"/reports/class/{class_id}", startDate=start_date, endDate=end_date)

    def delete(self, report_id: int) -> dict:
        return self._client.delete(f"/reports/{report_id}")


class DevicesApi(_Resource):
    def register(self, device_id: str, device_name: str) -> dict:
        return self._client.post("/instructor-devices/register", {"deviceId": device_id, "deviceName": device_name})

    def update_location(self, device_id: str, latitude: float, longitude: float, accuracy: float = 0.0) -> dict:
        return self._client.put(
            "/instructor-devices/location",
            {"deviceId": device_id, "latitude": latitude, "longitude": longitude, "accuracy": accuracy},
        )

    def list(self) -> list:
        return self._client.get("/instructor-devices/devices")

    def remove(self, device_id: str) -> dict:
        return self._client.delete(f"/instructor-devices/device/{device_id}")

    def instructor_location(self, instructor_code: str) -> dict:
        return self._client.get(f"/instructor-devices/location/{instructor_code}")


class LogsApi(_Resource):
    def all(self) -> list:
        return self._client.get("/logs")

    def activity(self) -> list:
        return self._client.get("/logs/activity")

    def for_user(self, account_id: int) -> list:
        return self._client.get(f"/logs/user/{account_id}")

    def clear(self) -> dict:
        return self._client.delete("/logs/clear")
