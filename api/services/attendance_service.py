"""
Attendance service: moves a scheduled class to completed or missed.
"""

from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session as DBSession

from api.models.class_session import ClassSession
from api.utils.logger import configure_logging
from scheduling.results import ErrorCode, ServiceResult
from scheduling.state_machine import OPEN_STATUS_VALUES, check_transition, normalize_status

logger = configure_logging()

_REJECTION_MESSAGES = {
    ErrorCode.SESSION_NOT_PENDING: "Attendance has already been marked for this class",
    ErrorCode.INVALID_STATUS: "Status must be 'completed' or 'missed'",
    ErrorCode.SUMMARY_REQUIRED: "Class summary is required for a completed class.",
}


class AttendanceService:
    def __init__(self, db: DBSession):
        self.db = db

    def mark_attendance(
        self,
        session_id: str,
        student_id: str,
        status: str,
        summary: Optional[str],
        tutor_id: Optional[str] = None,
    ) -> ServiceResult:
        """
        Record attendance for a class that is still scheduled.

        The write is a conditional UPDATE guarded on the open status, so when two
        tutors (or a retry) race on the same class only the first one lands and
        the other gets SESSION_NOT_PENDING.
        """
        session = self.db.query(ClassSession).filter(ClassSession.id == session_id).first()
        if session is None or session.student_id != student_id:
            return ServiceResult.failure(ErrorCode.SESSION_NOT_FOUND, f"Class {session_id} not found")
        if tutor_id is not None and session.tutor_id != tutor_id:
            logger.warning("attendance rejected: tutor=%s is not assigned to class=%s", tutor_id, session_id)
            return ServiceResult.failure(ErrorCode.NOT_AUTHORIZED, "Only the assigned tutor can mark this class")

        reason = check_transition(session.status, status, summary)
        if reason is not None:
            logger.warning("attendance rejected class=%s reason=%s", session_id, reason.value)
            return ServiceResult.failure(reason, _REJECTION_MESSAGES[reason])

        target = normalize_status(status)
        result = self.db.execute(
            update(ClassSession)
            .where(ClassSession.id == session_id, ClassSession.status.in_(OPEN_STATUS_VALUES))
            .values(status=target.value, summary=summary or "")
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount != 1:
            logger.warning("attendance lost race class=%s", session_id)
            return ServiceResult.failure(
                ErrorCode.SESSION_NOT_PENDING, _REJECTION_MESSAGES[ErrorCode.SESSION_NOT_PENDING]
            )

        self.db.refresh(session)
        logger.info("attendance marked class=%s status=%s", session_id, target.value)
        return ServiceResult.success(session, message=f"Class marked as {target.value}")
