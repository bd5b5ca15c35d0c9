"""
Progress service: per (student, subject) ordered list of completed chapters.
"""

from datetime import datetime

from sqlalchemy.orm import Session as DBSession

from api.models.models import ProgressLedger, User
from api.utils.logger import configure_logging
from scheduling.assignments import is_bound_tutor, parse_assignments
from scheduling.chapters import append_label, format_chapter_label, remove_label
from scheduling.results import ErrorCode, ServiceResult

logger = configure_logging()


class ProgressService:
    def __init__(self, db: DBSession):
        self.db = db

    def _get_ledger(self, student_id: str, subject: str):
        return self.db.query(ProgressLedger).filter(
            ProgressLedger.id == ProgressLedger.ledger_id(student_id, subject)
        ).first()

    def authorize_tutor(self, student_id: str, subject: str, tutor_id: str) -> ServiceResult:
        """Only the tutor bound to (student, subject) may edit that ledger."""
        student = self.db.query(User).filter(User.uid == student_id, User.role == "student").first()
        if student is None:
            return ServiceResult.failure(ErrorCode.UNKNOWN_STUDENT, f"Student {student_id} not found")
        if not is_bound_tutor(parse_assignments(student.assignments), subject, tutor_id):
            return ServiceResult.failure(
                ErrorCode.NOT_AUTHORIZED,
                f"You are not assigned to teach {subject} to {student.name}",
            )
        return ServiceResult.success(student)

    def get_progress(self, student_id: str, subject: str) -> list[str]:
        ledger = self._get_ledger(student_id, subject)
        if ledger is None:
            return []
        return list(ledger.completed_chapters or [])

    def append_chapter(self, student_id: str, subject: str, chapter_number, chapter_name) -> ServiceResult:
        """
        Record "Ch {number}: {name}" at the end of the ledger, creating it if needed.
        An exact duplicate is rejected rather than appended or moved.
        """
        label = format_chapter_label(chapter_number, chapter_name)
        if label is None:
            return ServiceResult.failure(
                ErrorCode.INVALID_CHAPTER_INPUT,
                "Please enter both chapter number and name.",
            )

        ledger = self._get_ledger(student_id, subject)
        current = list(ledger.completed_chapters or []) if ledger is not None else []
        updated = append_label(current, label)
        if updated is None:
            return ServiceResult.failure(ErrorCode.CHAPTER_ALREADY_RECORDED, f'"{label}" is already recorded')

        if ledger is None:
            ledger = ProgressLedger(
                id=ProgressLedger.ledger_id(student_id, subject),
                student_id=student_id,
                subject=subject,
            )
            self.db.add(ledger)
        # Assign a new list so the JSON column is flagged dirty.
        ledger.completed_chapters = updated
        ledger.updated_at = datetime.utcnow()
        self.db.commit()

        logger.info("chapter recorded student=%s subject=%s label=%r", student_id, subject, label)
        return ServiceResult.success(updated, message=f'Saved "{label}"')

    def remove_chapter(self, student_id: str, subject: str, chapter_label: str) -> ServiceResult:
        """Remove the first exact match. Removing a label that is not there is not an error."""
        ledger = self._get_ledger(student_id, subject)
        if ledger is None:
            return ServiceResult.success([])
        current = list(ledger.completed_chapters or [])
        updated = remove_label(current, chapter_label)
        if updated != current:
            ledger.completed_chapters = updated
            ledger.updated_at = datetime.utcnow()
            self.db.commit()
            logger.info("chapter removed student=%s subject=%s label=%r", student_id, subject, chapter_label)
        return ServiceResult.success(updated)
