from __future__ import annotations

import base64
import io
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

import jwt
import qrcode

from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_QR_TOKEN_TTL_SECONDS, QR_TOKEN_TYPE
from ..core.enums import AttendanceStatus, CaptureMethod, Role
from ..core.exceptions import AuthorizationError, DuplicateError, NotFoundError, ValidationError
from ..users.model import Account
from ..users.tokens import TokenSigner
from .model import RecordResult
from .service import AttendanceRecorder

logger = logging.getLogger(__name__)


def qr_png_base64(data: str) -> str:
    """Render ``data`` as a QR code and return the PNG as base64 text."""

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


class QrAttendanceService:
    """Short-lived class QR codes and the check-ins made with them."""

    def __init__(
        self,
        signer: TokenSigner,
        recorder: AttendanceRecorder,
        classes: ClassRepository,
        *,
        ttl_seconds: int = DEFAULT_QR_TOKEN_TTL_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._signer = signer
        self._recorder = recorder
        self._classes = classes
        self._ttl_seconds = int(ttl_seconds)
        self._clock = clock

    def _require_staff(self, actor: Account, message: str) -> None:
        if actor.role not in (Role.ADMIN, Role.INSTRUCTOR):
            raise AuthorizationError(message)

    def generate(self, class_id: int, instructor: Account) -> dict:
        self._require_staff(instructor, "Only instructors and admins can generate QR codes")
        if not self._classes.get_by_id(class_id):
            raise NotFoundError("Class not found")

        generated_at = self._clock()
        token = self._signer.sign(
            {
                "classId": int(class_id),
                "instructorId": instructor.user_code,
                "timestamp": generated_at.isoformat(),
                "type": QR_TOKEN_TYPE,
            },
            ttl=timedelta(seconds=self._ttl_seconds),
        )
        logger.info("qr token generated for class %s by %s", class_id, instructor.user_code)
        return {
            "token": token,
            "expiresIn": self._ttl_seconds,
            "generatedAt": generated_at.isoformat(),
            "qrImage": qr_png_base64(token),
        }

    def validate(self, token: str, student: Account) -> RecordResult:
        if not token:
            raise ValidationError("Token is required")
        try:
            claims = self._signer.verify(token)
        except jwt.InvalidTokenError:
            raise ValidationError("Invalid or expired QR code")
        if claims.get("type") != QR_TOKEN_TYPE:
            raise ValidationError("Invalid QR code type")

        class_id = int(claims["classId"])
        now = self._clock()
        if self._recorder.find_for_day(class_id, student.user_code, now.date()):
            raise DuplicateError("Attendance already marked for today", status_code=400)

        return self._recorder.record(
            class_id,
            student.user_code,
            status=AttendanceStatus.PRESENT,
            timestamp=now,
            method=CaptureMethod.SCAN,
        )

    def mark_from_student_code(
        self,
        class_id: int,
        student_code: str,
        actor: Account,
        *,
        timestamp: Optional[datetime] = None,
    ) -> RecordResult:
        """Instructor scans a student's personal code; the day's event is updated in place."""

        self._require_staff(actor, "Only instructors and admins can mark attendance")
        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        if actor.role == Role.INSTRUCTOR and school_class.instructor_code != actor.user_code:
            raise AuthorizationError("You do not have permission to mark attendance for this class")

        return self._recorder.record(
            class_id,
            student_code,
            status=AttendanceStatus.PRESENT,
            timestamp=timestamp or self._clock(),
            method=CaptureMethod.SCAN,
        )
