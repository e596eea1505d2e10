from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.attendance.service import AttendanceRecorder
from src.attendance_tracker.attendance_tracker.classes.service import ClassService
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import DuplicateError, NotFoundError, ValidationError
from src.attendance_tracker.attendance_tracker.students.service import EnrollmentService
from tests.fakes import at, in_memory_repositories, make_class

MONDAY = date(2025, 3, 3)
SUNDAY = date(2025, 3, 9)


@pytest.fixture
def repos():
    return in_memory_repositories()


@pytest.fixture
def enrollment(repos):
    return EnrollmentService(repos.students, ClassService(repos.classes), repos.attendance)


@pytest.fixture
def recorder(repos):
    return AttendanceRecorder(repos.attendance, repos.classes, repos.students)


def _ana(**extra):
    return {"studentId": "2024-0001", "firstName": "Ana", "lastName": "Reyes", "middleInitial": "B", **extra}


def test_add_creates_student_and_enrollment(enrollment, repos):
    cs = make_class(repos.classes)

    student = enrollment.add(cs.class_id, _ana())

    assert student.display_name == "Reyes, Ana B."
    assert [s.student_code for s in enrollment.list_for_class(cs.class_id)] == ["2024-0001"]


def test_add_requires_identity_fields(enrollment, repos):
    cs = make_class(repos.classes)
    with pytest.raises(ValidationError, match="studentId, firstName, lastName"):
        enrollment.add(cs.class_id, {"studentId": "2024-0001", "firstName": "Ana"})


def test_add_to_unknown_class(enrollment):
    with pytest.raises(NotFoundError, match="Class not found"):
        enrollment.add(404, _ana())


def test_duplicate_enrollment_is_rejected(enrollment, repos):
    cs = make_class(repos.classes)
    enrollment.add(cs.class_id, _ana())

    with pytest.raises(DuplicateError, match="already enrolled"):
        enrollment.add(cs.class_id, _ana())


def test_same_student_in_two_classes_shares_one_record(enrollment, repos):
    first = make_class(repos.classes)
    second = make_class(repos.classes)
    enrollment.add(first.class_id, _ana())
    enrollment.add(second.class_id, _ana(firstName="Anna"))

    assert len(repos.students.rows) == 1
    assert repos.students.get("2024-0001").first_name == "Anna"
    assert repos.students.class_ids_for("2024-0001") == [first.class_id, second.class_id]


def test_update_is_partial(enrollment, repos):
    cs = make_class(repos.classes)
    enrollment.add(cs.class_id, _ana())

    updated = enrollment.update(cs.class_id, "2024-0001", {"lastName": "Santos"})

    assert (updated.first_name, updated.last_name, updated.middle_initial) == ("Ana", "Santos", "B")


def test_update_requires_enrollment(enrollment, repos):
    cs = make_class(repos.classes)
    with pytest.raises(NotFoundError, match="Student not found in this class"):
        enrollment.update(cs.class_id, "2024-0001", {"lastName": "Santos"})


def test_remove_deletes_only_this_class_attendance(enrollment, recorder, repos):
    first = make_class(repos.classes)
    second = make_class(repos.classes)
    enrollment.add(first.class_id, _ana())
    enrollment.add(second.class_id, _ana())
    recorder.record(first.class_id, "2024-0001", timestamp=at(MONDAY))
    recorder.record(second.class_id, "2024-0001", timestamp=at(MONDAY))

    removed = enrollment.remove(first.class_id, "2024-0001")

    assert removed == 1
    assert repos.students.get_enrollment(first.class_id, "2024-0001") is None
    assert repos.attendance.get_for_day(second.class_id, "2024-0001", MONDAY) is not None
    assert repos.students.get("2024-0001") is not None


def test_remove_unknown_enrollment(enrollment, repos):
    cs = make_class(repos.classes)
    with pytest.raises(NotFoundError):
        enrollment.remove(cs.class_id, "2024-0001")


def test_today_classes_follow_schedule_days(enrollment, repos):
    mwf = make_class(repos.classes, days=("M", "W", "F"))
    tth = make_class(repos.classes, days=("T", "TH"))
    enrollment.add(mwf.class_id, _ana())
    enrollment.add(tth.class_id, _ana())

    assert [c.class_id for c in enrollment.today_classes("2024-0001", MONDAY)] == [mwf.class_id]
    assert enrollment.today_classes("2024-0001", SUNDAY) == []


def test_today_status_defaults_to_absent(enrollment, recorder, repos):
    mwf = make_class(repos.classes, days=("M",))
    other = make_class(repos.classes, days=("M",))
    enrollment.add(mwf.class_id, _ana())
    enrollment.add(other.class_id, _ana())
    recorder.record(mwf.class_id, "2024-0001", status=AttendanceStatus.LATE, timestamp=at(MONDAY, 8, 20))

    rows = {r["classId"]: r for r in enrollment.today_status("2024-0001", MONDAY)}

    assert rows[mwf.class_id]["status"] == "late"
    assert rows[mwf.class_id]["timestamp"] == at(MONDAY, 8, 20).isoformat()
    assert rows[other.class_id] == {
        "classId": other.class_id,
        "className": other.class_name,
        "subjectCode": other.subject_code,
        "status": "absent",
        "timestamp": None,
    }


def test_attendance_overview_uses_counters(enrollment, recorder, repos):
    cs = make_class(repos.classes)
    enrollment.add(cs.class_id, _ana())
    recorder.record(cs.class_id, "2024-0001", timestamp=at(MONDAY))
    recorder.record(cs.class_id, "2024-0001", status=AttendanceStatus.ABSENT, timestamp=at(date(2025, 3, 5)))

    overview = enrollment.attendance_overview("2024-0001")

    assert overview == {"present": 1, "absent": 1, "late": 0, "total": 2, "presentPercentage": 50}


def test_overview_for_unknown_student(enrollment):
    with pytest.raises(NotFoundError):
        enrollment.attendance_overview("2024-9999")


def test_lost_enrollment_race_raises_duplicate(enrollment, repos, monkeypatch):
    cs = make_class(repos.classes)
    enrollment.add(cs.class_id, _ana())
    repos.students.adjust_counters("2024-0001", increment=AttendanceStatus.PRESENT)
    monkeypatch.setattr(repos.students, "get_enrollment", lambda *args: None)

    with pytest.raises(DuplicateError) as exc:
        enrollment.add(cs.class_id, _ana())

    assert exc.value.status_code == 409
    assert len(repos.students.enrollments) == 1
    assert repos.students.get_counters("2024-0001").present == 1
