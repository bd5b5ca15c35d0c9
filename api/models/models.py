from api.config import Base
from sqlalchemy import Column, String, JSON, DateTime
from datetime import datetime

from scheduling.time_projection import REFERENCE_ZONE


class User(Base):
    __tablename__ = "users"
    uid = Column(String, primary_key=True, index=True)  # uuid
    custom_id = Column(String, unique=True, index=True, nullable=True)  # STU-XXXXXXXX / TUT-XXXXXXXX
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, index=True, nullable=False)  # admin|tutor|student
    timezone = Column(String, nullable=False, default=REFERENCE_ZONE)

    contact_number = Column(String, default="")
    class_level = Column(String, default="")
    emergency_contact = Column(String, default="")
    qualifications = Column(String, default="")
    hourly_rate = Column(String, default="")
    syllabus = Column(String, default="")
    medium_of_communication = Column(String, default="")
    permanent_class_link = Column(String, default="")
    subjects = Column(JSON, default=list)  # list[str]

    # Students only: [{subject, tutor_id, tutor_name}] and the derived tutor id index.
    assignments = Column(JSON, default=list)
    tutor_uids = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ProgressLedger(Base):
    __tablename__ = "progress"
    id = Column(String, primary_key=True, index=True)  # "{student_id}_{subject}"
    student_id = Column(String, index=True, nullable=False)
    subject = Column(String, nullable=False)
    completed_chapters = Column(JSON, nullable=False, default=list)  # ordered list[str]
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @staticmethod
    def ledger_id(student_id: str, subject: str) -> str:
        return f"{student_id}_{subject}"
