"""
Common utility functions used across multiple routes.
"""

import secrets
import string
from datetime import datetime
from typing import Optional

from fastapi import HTTPException

from api.models.class_session import ClassSession
from api.schemas.class_schemas import ClassResponse
from scheduling.results import ErrorCode, ServiceResult
from scheduling.state_machine import is_attendance_due, normalize_status
from scheduling.time_projection import format_display_date, format_display_time

_ID_ALPHABET = string.ascii_uppercase + string.digits

# Rejected service results -> HTTP status. Anything unlisted is a 400.
ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.UNKNOWN_STUDENT: 404,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.NOT_AUTHORIZED: 403,
    ErrorCode.CANNOT_DELETE_SELF: 403,
    ErrorCode.SESSION_NOT_PENDING: 409,
    ErrorCode.CHAPTER_ALREADY_RECORDED: 409,
    ErrorCode.EMAIL_IN_USE: 409,
}


def iso_format(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO string with Z suffix."""
    if dt is None:
        return None
    return dt.isoformat() + "Z"


def generate_custom_id(prefix: str) -> str:
    """Human-facing id such as 'STU-A1B2C3D4'."""
    return prefix + "-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(8))


def raise_for_result(result: ServiceResult) -> None:
    """Translate a rejected service result into an HTTPException."""
    if result.ok:
        return
    status_code = ERROR_STATUS.get(result.error, 400)
    raise HTTPException(
        status_code=status_code,
        detail={"error": result.error.value if result.error else None, "message": result.message},
    )


def class_to_response(cls: ClassSession, viewer_timezone: str, now: Optional[datetime] = None) -> ClassResponse:
    """Serialize a class with its date/time projected into the viewer's zone."""
    try:
        status = normalize_status(cls.status).value
    except ValueError:
        status = str(cls.status)
    return ClassResponse(
        id=cls.id,
        student_id=cls.student_id,
        student_name=cls.student_name or "",
        tutor_id=cls.tutor_id,
        tutor_name=cls.tutor_name or "",
        subject=cls.subject,
        class_date=cls.class_date,
        class_time=cls.class_time,
        status=status,
        is_rescheduled=bool(cls.is_rescheduled),
        original_class_date=cls.original_class_date or "",
        summary=cls.summary or "",
        created_at=iso_format(cls.created_at),
        display_date=format_display_date(cls.class_date, cls.class_time, viewer_timezone),
        display_time=format_display_time(cls.class_date, cls.class_time, viewer_timezone),
        is_due=is_attendance_due(cls.status, cls.class_date, cls.class_time, now),
    )
