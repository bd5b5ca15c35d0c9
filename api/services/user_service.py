"""
User service: the privileged account operations an admin performs on behalf of
other users (create, update, delete), plus the tutor -> students lookup.

Student profiles carry the subject/tutor assignments and the derived
`tutor_uids` index; both are always written together.
"""

from datetime import datetime
from typing import Any, Iterable, Optional
from uuid import uuid4

from sqlalchemy.orm import Session as DBSession

from api.models.class_session import ClassSession
from api.models.models import ProgressLedger, User
from api.utils.common import generate_custom_id
from api.utils.jwt import get_password_hash
from api.utils.logger import configure_logging
from scheduling.assignments import (
    Assignment,
    derive_tutor_uids,
    duplicate_subjects,
    parse_assignments,
)
from scheduling.results import ErrorCode, ServiceResult
from scheduling.time_projection import REFERENCE_ZONE, is_known_timezone

logger = configure_logging()

ROLES = ("admin", "tutor", "student")
ID_PREFIXES = {"student": "STU", "tutor": "TUT"}
PROFILE_FIELDS = (
    "contact_number",
    "class_level",
    "emergency_contact",
    "qualifications",
    "hourly_rate",
    "syllabus",
    "medium_of_communication",
    "permanent_class_link",
)


class UserService:
    def __init__(self, db: DBSession):
        self.db = db

    def get_user(self, uid: str) -> Optional[User]:
        return self.db.query(User).filter(User.uid == uid).first()

    def _email_taken(self, email: str, exclude_uid: Optional[str] = None) -> bool:
        query = self.db.query(User).filter(User.email == email)
        if exclude_uid:
            query = query.filter(User.uid != exclude_uid)
        return query.first() is not None

    def _resolve_assignments(self, raw: Iterable[Any]) -> ServiceResult:
        """Validate student assignments and fill in tutor names from tutor profiles."""
        assignments = parse_assignments(
            [a.model_dump() if hasattr(a, "model_dump") else a for a in (raw or [])]
        )
        dupes = duplicate_subjects(assignments)
        if dupes:
            return ServiceResult.failure(
                ErrorCode.DUPLICATE_SUBJECT,
                f"Each subject can have only one tutor: {', '.join(dupes)}",
            )
        resolved: list[Assignment] = []
        for a in assignments:
            tutor = self.db.query(User).filter(User.uid == a.tutor_id, User.role == "tutor").first()
            if tutor is None:
                return ServiceResult.failure(ErrorCode.UNKNOWN_TUTOR, f"Tutor {a.tutor_id} not found for {a.subject}")
            resolved.append(Assignment(subject=a.subject, tutor_id=a.tutor_id, tutor_name=a.tutor_name or tutor.name))
        return ServiceResult.success(resolved)

    def _apply_assignments(self, user: User, assignments: list[Assignment]) -> None:
        # tutor_uids is recomputed from the full list, never patched.
        user.assignments = [a.to_dict() for a in assignments]
        user.tutor_uids = derive_tutor_uids(assignments)
        user.subjects = [a.subject for a in assignments]

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: str,
        timezone: Optional[str] = None,
        subjects: Optional[list[str]] = None,
        assignments: Optional[Iterable[Any]] = None,
        profile: Optional[dict[str, Any]] = None,
    ) -> ServiceResult:
        if not (name or "").strip() or not (email or "").strip() or not password or not role:
            return ServiceResult.failure(
                ErrorCode.MISSING_FIELDS, "Missing required fields: name, email, password, role"
            )
        if role not in ROLES:
            return ServiceResult.failure(ErrorCode.INVALID_ROLE, f"Unknown role: {role}")
        if timezone and not is_known_timezone(timezone):
            return ServiceResult.failure(ErrorCode.INVALID_TIMEZONE, f"Unknown timezone: {timezone}")
        email = email.strip().lower()
        if self._email_taken(email):
            return ServiceResult.failure(ErrorCode.EMAIL_IN_USE, "Email already in use")

        user = User(
            uid=str(uuid4()),
            custom_id=generate_custom_id(ID_PREFIXES[role]) if role in ID_PREFIXES else None,
            email=email,
            hashed_password=get_password_hash(password),
            name=name.strip(),
            role=role,
            timezone=timezone or REFERENCE_ZONE,
            subjects=list(subjects or []) if role == "tutor" else [],
            assignments=[],
            tutor_uids=[],
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow(),
        )
        for field in PROFILE_FIELDS:
            setattr(user, field, str((profile or {}).get(field) or ""))

        if role == "student":
            resolved = self._resolve_assignments(assignments or [])
            if not resolved.ok:
                return resolved
            self._apply_assignments(user, resolved.value)

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("user created uid=%s role=%s custom_id=%s", user.uid, role, user.custom_id)
        return ServiceResult.success(user, message=f"{role} created with ID: {user.custom_id or user.uid}")

    def update_user(
        self,
        uid: str,
        *,
        name: str,
        email: str,
        timezone: Optional[str] = None,
        subjects: Optional[list[str]] = None,
        assignments: Optional[Iterable[Any]] = None,
        profile: Optional[dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Rewrite a profile. Role never changes. For students the subject list and
        tutor index are rebuilt from the submitted assignments; existing class
        sessions keep the names they were scheduled with.
        """
        user = self.get_user(uid)
        if user is None:
            return ServiceResult.failure(ErrorCode.USER_NOT_FOUND, f"User {uid} not found")
        if not (name or "").strip() or not (email or "").strip():
            return ServiceResult.failure(ErrorCode.MISSING_FIELDS, "Missing required fields: name, email")
        if timezone and not is_known_timezone(timezone):
            return ServiceResult.failure(ErrorCode.INVALID_TIMEZONE, f"Unknown timezone: {timezone}")
        email = email.strip().lower()
        if self._email_taken(email, exclude_uid=uid):
            return ServiceResult.failure(ErrorCode.EMAIL_IN_USE, "Email already in use")

        if user.role == "student":
            resolved = self._resolve_assignments(assignments or [])
            if not resolved.ok:
                return resolved
            self._apply_assignments(user, resolved.value)
        elif user.role == "tutor":
            user.subjects = list(subjects or [])

        user.name = name.strip()
        user.email = email
        if timezone:
            user.timezone = timezone
        for field in PROFILE_FIELDS:
            setattr(user, field, str((profile or {}).get(field) or ""))
        user.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(user)
        logger.info("user updated uid=%s role=%s", uid, user.role)
        return ServiceResult.success(user, message=f"{user.role} profile updated successfully.")

    def set_timezone(self, uid: str, timezone: str) -> ServiceResult:
        if not is_known_timezone(timezone):
            return ServiceResult.failure(ErrorCode.INVALID_TIMEZONE, f"Unknown timezone: {timezone}")
        user = self.get_user(uid)
        if user is None:
            return ServiceResult.failure(ErrorCode.USER_NOT_FOUND, f"User {uid} not found")
        user.timezone = timezone
        user.updated_at = datetime.utcnow()
        self.db.commit()
        return ServiceResult.success(user, message="Timezone updated")

    def delete_user(self, uid: str, acting_uid: str) -> ServiceResult:
        """Hard delete a user together with the classes and progress that belong to them as a student."""
        if uid == acting_uid:
            return ServiceResult.failure(
                ErrorCode.CANNOT_DELETE_SELF, "Cannot delete the currently signed-in admin user."
            )
        user = self.get_user(uid)
        if user is None:
            return ServiceResult.failure(ErrorCode.USER_NOT_FOUND, "User not found.")

        classes_deleted = (
            self.db.query(ClassSession)
            .filter(ClassSession.student_id == uid)
            .delete(synchronize_session=False)
        )
        ledgers_deleted = (
            self.db.query(ProgressLedger)
            .filter(ProgressLedger.student_id == uid)
            .delete(synchronize_session=False)
        )
        self.db.delete(user)
        self.db.commit()
        logger.info(
            "user deleted uid=%s classes_deleted=%s ledgers_deleted=%s", uid, classes_deleted, ledgers_deleted
        )
        return ServiceResult.success(
            {"classes_deleted": classes_deleted, "ledgers_deleted": ledgers_deleted},
            message=f"User {uid} and associated data deleted successfully.",
        )

    def list_users(self, role: Optional[str] = None) -> list[User]:
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.created_at.desc()).all()

    def students_for_tutor(self, tutor_id: str) -> list[User]:
        """Students with at least one subject bound to `tutor_id`, by name."""
        students = self.db.query(User).filter(User.role == "student").all()
        mine = [
            s for s in students
            if tutor_id in (s.tutor_uids or [])
            and any(a.tutor_id == tutor_id for a in parse_assignments(s.assignments))
        ]
        return sorted(mine, key=lambda s: (s.name or "").lower())
