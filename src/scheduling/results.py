"""
Outcome type returned by the scheduling, attendance, progress and user services.
Callers branch on `ok` and render `message` inline; nothing is raised for
rejected operations.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Why an operation was rejected."""
    # input validation
    INVALID_DATE_OR_TIME = "invalid_date_or_time"
    INVALID_STATUS = "invalid_status"
    INVALID_CHAPTER_INPUT = "invalid_chapter_input"
    INVALID_ROLE = "invalid_role"
    INVALID_TIMEZONE = "invalid_timezone"
    MISSING_FIELDS = "missing_fields"
    # invariant violations
    UNKNOWN_STUDENT = "unknown_student"
    UNKNOWN_TUTOR = "unknown_tutor"
    SUBJECT_NOT_ASSIGNED = "subject_not_assigned"
    TUTOR_MISMATCH = "tutor_mismatch"
    ORIGINAL_SESSION_NOT_MISSED = "original_session_not_missed"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_NOT_PENDING = "session_not_pending"
    SUMMARY_REQUIRED = "summary_required"
    CHAPTER_ALREADY_RECORDED = "chapter_already_recorded"
    DUPLICATE_SUBJECT = "duplicate_subject"
    EMAIL_IN_USE = "email_in_use"
    USER_NOT_FOUND = "user_not_found"
    CANNOT_DELETE_SELF = "cannot_delete_self"
    NOT_AUTHORIZED = "not_authorized"


@dataclass
class ServiceResult:
    ok: bool
    value: Any = None
    error: Optional[ErrorCode] = None
    message: str = ""

    @classmethod
    def success(cls, value: Any = None, message: str = "") -> "ServiceResult":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: ErrorCode, message: str) -> "ServiceResult":
        return cls(ok=False, error=error, message=message)
