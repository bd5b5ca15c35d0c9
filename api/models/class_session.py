"""
Class session model: one tutor, one student, one subject, one reference-zone slot.
"""

from api.config import Base
from sqlalchemy import Column, String, Boolean, Text, DateTime, Index
from datetime import datetime

from scheduling.state_machine import SessionStatus


class ClassSession(Base):
    """
    A single scheduled lesson.

    - class_date / class_time are civil values in the reference zone (IST)
    - status is stored as plain text so legacy "pending" rows still load
    - student_name / tutor_name are snapshots taken at scheduling time
    """
    __tablename__ = "classes"

    id = Column(String, primary_key=True, index=True)  # uuid
    student_id = Column(String, index=True, nullable=False)
    student_name = Column(String, nullable=False, default="")
    tutor_id = Column(String, index=True, nullable=False)
    tutor_name = Column(String, nullable=False, default="")
    subject = Column(String, nullable=False)

    class_date = Column(String, nullable=False)  # YYYY-MM-DD
    class_time = Column(String, nullable=False)  # HH:MM (24h)

    status = Column(String, nullable=False, default=SessionStatus.SCHEDULED.value, index=True)
    is_rescheduled = Column(Boolean, nullable=False, default=False)
    original_class_date = Column(String, nullable=False, default="")
    summary = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_classes_student_subject_status", "student_id", "subject", "status"),
    )
