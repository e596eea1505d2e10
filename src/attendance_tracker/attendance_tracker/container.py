from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.qr import QrAttendanceService
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceRecorder
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .core.constants import (
    DEFAULT_QR_TOKEN_TTL_SECONDS,
    DEFAULT_SESSION_SWEEP_SECONDS,
    DEFAULT_STALE_SESSION_HOURS,
    DEFAULT_TOKEN_TTL_DAYS,
)
from .database.connection import DBConfig, DatabaseConnection
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.repository import DeviceRepository
from .devices.service import DeviceService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .sessions.mysql_session_repository import MySQLSessionLogRepository
from .sessions.repository import SessionLogRepository
from .sessions.service import SessionLogService
from .sessions.sweeper import StaleSessionSweeper
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import EnrollmentService
from .users.mysql_account_repository import MySQLAccountRepository
from .users.repository import AccountRepository
from .users.service import AccountService, AuthService
from .users.tokens import BearerTokens, TokenSigner


@dataclass(frozen=True)
class Repositories:
    accounts: AccountRepository
    classes: ClassRepository
    students: StudentRepository
    attendance: AttendanceRepository
    sessions: SessionLogRepository
    reports: ReportRepository
    devices: DeviceRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories

    auth_service: AuthService
    account_service: AccountService
    class_service: ClassService
    enrollment_service: EnrollmentService
    attendance_recorder: AttendanceRecorder
    qr_service: QrAttendanceService
    session_service: SessionLogService
    session_sweeper: StaleSessionSweeper
    report_service: ReportService
    device_service: DeviceService


def _setting(settings: Any, name: str, default):
    return getattr(settings, name, default) if settings is not None else default


def wire(repos: Repositories, *, settings: Any = None) -> Container:
    """Build every service on top of the given repositories."""

    signer = TokenSigner(str(_setting(settings, "JWT_SECRET", "dev-jwt-secret")))
    tokens = BearerTokens(signer, ttl_days=int(_setting(settings, "TOKEN_TTL_DAYS", DEFAULT_TOKEN_TTL_DAYS)))

    class_service = ClassService(repos.classes)
    recorder = AttendanceRecorder(repos.attendance, repos.classes, repos.students)
    session_service = SessionLogService(
        repos.sessions,
        stale_after_hours=int(_setting(settings, "STALE_SESSION_HOURS", DEFAULT_STALE_SESSION_HOURS)),
    )

    return Container(
        repos=repos,
        auth_service=AuthService(repos.accounts, tokens),
        account_service=AccountService(repos.accounts),
        class_service=class_service,
        enrollment_service=EnrollmentService(repos.students, class_service, repos.attendance),
        attendance_recorder=recorder,
        qr_service=QrAttendanceService(
            signer,
            recorder,
            repos.classes,
            ttl_seconds=int(_setting(settings, "QR_TOKEN_TTL_SECONDS", DEFAULT_QR_TOKEN_TTL_SECONDS)),
        ),
        session_service=session_service,
        session_sweeper=StaleSessionSweeper(
            session_service,
            interval_seconds=float(_setting(settings, "SESSION_SWEEP_SECONDS", DEFAULT_SESSION_SWEEP_SECONDS)),
        ),
        report_service=ReportService(repos.reports, class_service, repos.students, repos.attendance),
        device_service=DeviceService(repos.devices, repos.accounts),
    )


def build_container(*, db_config: dict, settings: Optional[Any] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    repos = Repositories(
        accounts=MySQLAccountRepository(conn),
        classes=MySQLClassRepository(conn),
        students=MySQLStudentRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        sessions=MySQLSessionLogRepository(conn),
        reports=MySQLReportRepository(conn),
        devices=MySQLDeviceRepository(conn),
    )
    return wire(repos, settings=settings)
