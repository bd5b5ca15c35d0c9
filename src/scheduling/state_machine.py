"""
Class session status rules.

scheduled -> completed   (summary of topics covered required)
scheduled -> missed      (absence reason optional)

completed and missed are terminal. Rescheduling never rewinds a missed class;
it creates a new scheduled one that points back at the missed date.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from scheduling.results import ErrorCode
from scheduling.time_projection import InvalidTimeInput, to_reference_instant


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    MISSED = "missed"


# Legacy rows were written as "pending" before "scheduled" existed.
PENDING_ALIAS = "pending"
OPEN_STATUS_VALUES = (SessionStatus.SCHEDULED.value, PENDING_ALIAS)
TERMINAL_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.MISSED})


def normalize_status(raw: Optional[str]) -> SessionStatus:
    """Read a stored status value. Missing and "pending" both mean scheduled."""
    if raw is None:
        return SessionStatus.SCHEDULED
    if isinstance(raw, SessionStatus):
        return raw
    value = str(raw).strip().lower()
    if not value or value == PENDING_ALIAS:
        return SessionStatus.SCHEDULED
    return SessionStatus(value)


def is_terminal(status: Optional[str]) -> bool:
    return normalize_status(status) in TERMINAL_STATUSES


def check_transition(current: Optional[str], target: str, summary: Optional[str]) -> Optional[ErrorCode]:
    """
    Validate an attendance transition.
    Returns the rejection reason, or None when the transition is allowed.
    """
    try:
        if is_terminal(current):
            return ErrorCode.SESSION_NOT_PENDING
    except ValueError:
        return ErrorCode.SESSION_NOT_PENDING
    try:
        target_status = normalize_status(target)
    except ValueError:
        return ErrorCode.INVALID_STATUS
    if target_status not in TERMINAL_STATUSES:
        return ErrorCode.INVALID_STATUS
    if target_status == SessionStatus.COMPLETED and not (summary or "").strip():
        return ErrorCode.SUMMARY_REQUIRED
    return None


def is_attendance_due(
    status: Optional[str],
    class_date: Optional[str],
    class_time: Optional[str],
    now: Optional[datetime] = None,
) -> bool:
    """
    A class is due for attendance once its start instant has passed and it is
    still scheduled. Recomputed on every read; never stored.
    """
    try:
        if is_terminal(status):
            return False
    except ValueError:
        return False
    try:
        starts_at = to_reference_instant(class_date, class_time)
    except InvalidTimeInput:
        return False
    now = now or datetime.now(timezone.utc)
    return starts_at < now


def sort_key(class_date: Optional[str], class_time: Optional[str]) -> tuple[str, str]:
    """Ascending date+time order for dashboards (zero-padded ISO strings sort lexically)."""
    return (class_date or "", class_time or "")
