"""
Scheduling service: creates class sessions from a student's subject/tutor
assignments, including make-up classes for missed sessions.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import uuid4
from datetime import datetime

from sqlalchemy.orm import Session as DBSession

from api.models.class_session import ClassSession
from api.models.models import User
from api.utils.logger import configure_logging
from scheduling.assignments import find_assignment, parse_assignments
from scheduling.results import ErrorCode, ServiceResult
from scheduling.state_machine import OPEN_STATUS_VALUES, SessionStatus, sort_key
from scheduling.time_projection import InvalidTimeInput, parse_class_date, to_reference_instant

logger = configure_logging()


@dataclass
class RescheduleRequest:
    """Make-up class for the missed session held on `original_class_date`."""
    original_class_date: str


class SchedulingService:
    """Admin-side creation, lookup and deletion of class sessions."""

    def __init__(self, db: DBSession):
        self.db = db

    def _get_student(self, student_id: str) -> Optional[User]:
        if not student_id:
            return None
        return self.db.query(User).filter(User.uid == student_id, User.role == "student").first()

    def _missed_query(self, student_id: str, subject: str):
        return self.db.query(ClassSession).filter(
            ClassSession.student_id == student_id,
            ClassSession.subject == subject,
            ClassSession.status == SessionStatus.MISSED.value,
        )

    def schedule_session(
        self,
        student_id: str,
        subject: str,
        tutor_id: str,
        class_date: str,
        class_time: str,
        reschedule: Optional[RescheduleRequest] = None,
    ) -> ServiceResult:
        """
        Create a new scheduled class.

        The tutor id supplied by the caller is checked against the tutor bound
        to `subject` on the student profile; it is never trusted on its own.
        On the reschedule path the original date must match a class of the same
        student and subject that is currently missed. The missed class is not
        modified.

        Dates and times are stored zero-padded ("2024-03-10", "09:05") so they
        compare and sort as strings.
        """
        try:
            starts_at = to_reference_instant(class_date, class_time)
        except InvalidTimeInput as e:
            return ServiceResult.failure(ErrorCode.INVALID_DATE_OR_TIME, str(e))

        student = self._get_student(student_id)
        if student is None:
            return ServiceResult.failure(ErrorCode.UNKNOWN_STUDENT, f"Student {student_id} not found")

        binding = find_assignment(parse_assignments(student.assignments), subject)
        if binding is None:
            return ServiceResult.failure(
                ErrorCode.SUBJECT_NOT_ASSIGNED,
                f"{subject} is not assigned to {student.name}",
            )
        if binding.tutor_id != tutor_id:
            logger.warning(
                "schedule rejected: tutor mismatch student=%s subject=%s bound=%s given=%s",
                student_id, subject, binding.tutor_id, tutor_id,
            )
            return ServiceResult.failure(
                ErrorCode.TUTOR_MISMATCH,
                f"Tutor {tutor_id} is not assigned to {subject} for {student.name}",
            )

        original_class_date = ""
        if reschedule is not None:
            original_class_date = (reschedule.original_class_date or "").strip()
            if not original_class_date:
                return ServiceResult.failure(
                    ErrorCode.ORIGINAL_SESSION_NOT_MISSED,
                    "Original class date is required for rescheduled classes",
                )
            try:
                original_class_date = parse_class_date(original_class_date).strftime("%Y-%m-%d")
            except InvalidTimeInput as e:
                return ServiceResult.failure(ErrorCode.INVALID_DATE_OR_TIME, str(e))
            missed = self._missed_query(student_id, subject).filter(
                ClassSession.class_date == original_class_date
            ).first()
            if missed is None:
                return ServiceResult.failure(
                    ErrorCode.ORIGINAL_SESSION_NOT_MISSED,
                    f"No missed {subject} class on {original_class_date} for {student.name}",
                )

        # The binding can outlive a deleted tutor account.
        tutor = self.db.query(User).filter(User.uid == tutor_id, User.role == "tutor").first()
        if tutor is None:
            return ServiceResult.failure(ErrorCode.UNKNOWN_TUTOR, f"Tutor {tutor_id} no longer exists")
        tutor_name = binding.tutor_name or tutor.name

        session = ClassSession(
            id=str(uuid4()),
            student_id=student_id,
            student_name=student.name,
            tutor_id=tutor_id,
            tutor_name=tutor_name,
            subject=subject,
            class_date=starts_at.strftime("%Y-%m-%d"),
            class_time=starts_at.strftime("%H:%M"),
            status=SessionStatus.SCHEDULED.value,
            is_rescheduled=reschedule is not None,
            original_class_date=original_class_date,
            summary="",
            created_at=datetime.utcnow(),
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)

        logger.info(
            "class scheduled id=%s student=%s tutor=%s subject=%s at=%s %s rescheduled=%s",
            session.id, student_id, tutor_id, subject, session.class_date, session.class_time,
            session.is_rescheduled,
        )
        return ServiceResult.success(session, message=f"Class scheduled successfully for {student.name}")

    def list_reschedule_targets(self, student_id: str, subject: str) -> list[ClassSession]:
        """Missed classes an admin may pick as the original of a make-up class, newest first."""
        return (
            self._missed_query(student_id, subject)
            .order_by(ClassSession.class_date.desc(), ClassSession.class_time.desc())
            .all()
        )

    def get_session(self, session_id: str) -> Optional[ClassSession]:
        return self.db.query(ClassSession).filter(ClassSession.id == session_id).first()

    def delete_session(self, session_id: str) -> ServiceResult:
        session = self.get_session(session_id)
        if session is None:
            return ServiceResult.failure(ErrorCode.SESSION_NOT_FOUND, f"Class {session_id} not found")
        self.db.delete(session)
        self.db.commit()
        logger.info("class deleted id=%s student=%s", session_id, session.student_id)
        return ServiceResult.success(session, message=f"Class {session_id} deleted successfully.")

    def classes_for_viewer(self, uid: str, role: str) -> list[ClassSession]:
        """Classes visible to a user, ascending by date and time."""
        query = self.db.query(ClassSession)
        if role == "tutor":
            query = query.filter(ClassSession.tutor_id == uid)
        elif role == "student":
            query = query.filter(ClassSession.student_id == uid)
        elif role != "admin":
            return []
        return sorted(query.all(), key=lambda c: sort_key(c.class_date, c.class_time))

    def class_stats(self, student_id: str) -> dict[str, int]:
        classes = self.db.query(ClassSession).filter(ClassSession.student_id == student_id).all()
        return {
            "total": len(classes),
            "scheduled": sum(1 for c in classes if c.status in OPEN_STATUS_VALUES),
            "completed": sum(1 for c in classes if c.status == SessionStatus.COMPLETED.value),
            "missed": sum(1 for c in classes if c.status == SessionStatus.MISSED.value),
            "rescheduled": sum(1 for c in classes if c.is_rescheduled),
        }
