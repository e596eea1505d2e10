from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.students import controller as students_controller

SLOT = {"days": ["M", "W"], "startTime": "8:00", "startPeriod": "AM", "endTime": "9:30", "endPeriod": "AM"}


def _class_payload(**extra):
    return {
        "className": "Data Structures",
        "subjectCode": "CS201",
        "course": "BSCS",
        "room": "R-101",
        "yearSection": "2A",
        "schedules": [SLOT],
        **extra,
    }


@pytest.fixture
def monday(monkeypatch):
    monkeypatch.setattr(students_controller, "now_local", lambda: datetime(2025, 3, 3, 7, 30))


def test_instructor_creates_and_sees_only_own_classes(client, auth):
    mine = client.post("/api/classes", json=_class_payload(), headers=auth("instructor"))
    assert mine.status_code == 201
    assert mine.get_json()["instructorId"] == "T-2024"

    client.post("/api/classes", json=_class_payload(instructorId="T-2025"), headers=auth("admin"))

    assert len(client.get("/api/classes", headers=auth("instructor")).get_json()) == 1
    assert len(client.get("/api/classes", headers=auth("admin")).get_json()) == 2
    assert client.post("/api/classes", json=_class_payload(), headers=auth("student")).status_code == 403


def test_class_update_and_delete(client, auth):
    class_id = client.post("/api/classes", json=_class_payload(), headers=auth("instructor")).get_json()["id"]

    updated = client.put(f"/api/classes/{class_id}", json={"room": "R-202"}, headers=auth("instructor"))
    assert updated.get_json()["room"] == "R-202"

    bad = client.put(f"/api/classes/{class_id}", json={"schedules": [{"days": ["X"]}]}, headers=auth("instructor"))
    assert bad.status_code == 400

    assert client.delete(f"/api/classes/{class_id}", headers=auth("instructor")).status_code == 200
    assert client.get(f"/api/classes/{class_id}", headers=auth("instructor")).status_code == 404


def test_roster_management(client, auth):
    class_id = client.post("/api/classes", json=_class_payload(), headers=auth("instructor")).get_json()["id"]
    student = {"classId": class_id, "studentId": "2024-0001", "firstName": "Ana", "lastName": "Reyes"}

    added = client.post("/api/students", json=student, headers=auth("instructor"))
    assert added.status_code == 201
    assert added.get_json()["student"]["displayName"] == "Reyes, Ana"

    assert client.post("/api/students", json=student, headers=auth("instructor")).status_code == 409
    assert client.post("/api/students", json={"studentId": "2024-0001"}, headers=auth("instructor")).status_code == 400

    roster = client.get(f"/api/students/{class_id}", headers=auth("instructor")).get_json()
    assert [s["studentId"] for s in roster] == ["2024-0001"]

    renamed = client.put(f"/api/students/{class_id}/2024-0001", json={"middleInitial": "Q"}, headers=auth("instructor"))
    assert renamed.get_json()["displayName"] == "Reyes, Ana Q."

    removed = client.delete(f"/api/students/{class_id}/2024-0001", headers=auth("instructor"))
    assert removed.get_json()["attendanceRemoved"] == 0
    assert client.delete(f"/api/students/{class_id}/2024-0001", headers=auth("instructor")).status_code == 404


def test_student_dashboard_routes(client, auth, monday):
    class_id = client.post("/api/classes", json=_class_payload(), headers=auth("instructor")).get_json()["id"]
    client.post(
        "/api/students",
        json={"classId": class_id, "studentId": "2024-0001", "firstName": "Ana", "lastName": "Reyes"},
        headers=auth("instructor"),
    )
    client.post(
        "/api/attendance",
        json={"classId": class_id, "studentId": "2024-0001", "status": "late", "timestamp": "2025-03-03T08:10:00"},
        headers=auth("student"),
    )

    today = client.get("/api/students/2024-0001/classes/today", headers=auth("student")).get_json()
    assert [c["id"] for c in today] == [class_id]

    status = client.get("/api/students/2024-0001/attendance/today", headers=auth("student")).get_json()
    assert status[0]["status"] == "late"

    overview = client.get("/api/students/2024-0001/attendance/overview", headers=auth("student")).get_json()
    assert overview["late"] == 1
    assert overview["presentPercentage"] == 0

    assert client.get("/api/students/2024-0001/attendance/overview", headers=auth("other_student")).status_code == 403
