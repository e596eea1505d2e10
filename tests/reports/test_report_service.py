from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.attendance.service import AttendanceRecorder
from src.attendance_tracker.attendance_tracker.classes.service import ClassService
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import NotFoundError, ValidationError
from src.attendance_tracker.attendance_tracker.reports.service import ReportService
from tests.fakes import at, enroll, in_memory_repositories, make_class

DAY = date(2025, 3, 3)


@pytest.fixture
def repos():
    return in_memory_repositories()


@pytest.fixture
def reports(repos):
    return ReportService(repos.reports, ClassService(repos.classes), repos.students, repos.attendance)


def _payload(**extra):
    return {
        "date": "2025-03-03",
        "classId": 1,
        "className": "Data Structures",
        "subjectCode": "CS201",
        "totalStudents": 2,
        "presentCount": 1,
        "absentCount": 1,
        "students": [
            {"studentId": "2024-0001", "studentName": "Reyes, Ana", "status": "present"},
            {"studentId": "2024-0002", "studentName": "Cruz, Ben", "status": "absent"},
        ],
        **extra,
    }


def test_save_creates_then_replaces_same_class_and_date(reports, repos):
    first, created = reports.save(_payload())
    assert created is True

    second, created_again = reports.save(
        _payload(presentCount=2, absentCount=0, students=[
            {"studentId": "2024-0001", "studentName": "Reyes, Ana", "status": "present"},
            {"studentId": "2024-0002", "studentName": "Cruz, Ben", "status": "late"},
        ])
    )

    assert created_again is False
    assert second.report_id == first.report_id
    assert second.present_count == 2
    assert second.students[1].status == AttendanceStatus.LATE
    assert len(repos.reports.rows) == 1


def test_save_requires_every_field(reports):
    payload = _payload()
    del payload["subjectCode"]
    with pytest.raises(ValidationError, match="Missing required fields"):
        reports.save(payload)


@pytest.mark.parametrize(
    "override",
    [
        {"date": "03/03/2025"},
        {"presentCount": -1},
        {"totalStudents": "many"},
        {"students": "everyone"},
        {"students": [{"studentId": "2024-0001", "studentName": "Ana", "status": "sick"}]},
    ],
)
def test_save_rejects_malformed_payloads(reports, override):
    with pytest.raises(ValidationError):
        reports.save(_payload(**override))


def test_snapshot_counts_late_as_present_and_missing_as_absent(reports, repos):
    cs = make_class(repos.classes)
    enroll(repos.students, cs.class_id, "2024-0001")
    enroll(repos.students, cs.class_id, "2024-0002", first="Ben", last="Cruz")
    enroll(repos.students, cs.class_id, "2024-0003", first="Cy", last="Lim")
    recorder = AttendanceRecorder(repos.attendance, repos.classes, repos.students)
    recorder.record(cs.class_id, "2024-0001", timestamp=at(DAY))
    recorder.record(cs.class_id, "2024-0003", status=AttendanceStatus.LATE, timestamp=at(DAY))

    report, created = reports.snapshot_from_events(cs.class_id, DAY)

    assert created is True
    assert (report.total_students, report.present_count, report.absent_count) == (3, 2, 1)
    assert {e.student_code: e.status for e in report.students} == {
        "2024-0001": AttendanceStatus.PRESENT,
        "2024-0002": AttendanceStatus.ABSENT,
        "2024-0003": AttendanceStatus.LATE,
    }
    assert report.to_dict()["className"] == "Data Structures"


def test_list_filters_by_class_and_range(reports):
    reports.save(_payload())
    reports.save(_payload(date="2025-03-05"))
    reports.save(_payload(classId=2))

    assert [r.report_date for r in reports.list_for_class(1)] == [date(2025, 3, 5), DAY]
    assert len(reports.list_all(start=date(2025, 3, 4))) == 1


def test_delete(reports):
    report, _ = reports.save(_payload())
    reports.delete(report.report_id)

    with pytest.raises(NotFoundError, match="Report not found"):
        reports.delete(report.report_id)
