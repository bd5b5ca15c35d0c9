"""
Tutor dashboard: the students assigned to the caller with per-subject progress.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.user_schemas import (
    TutorStudentListResponse,
    TutorStudentResponse,
    TutorStudentSubject,
    User,
)
from api.services.progress_service import ProgressService
from api.services.user_service import UserService
from api.utils.auth import require_role
from scheduling.assignments import parse_assignments, subjects_for_tutor
from scheduling.chapters import latest_label

tutor_routes = APIRouter()


@tutor_routes.get("/tutor/students", response_model=TutorStudentListResponse)
async def my_students(
    current_user: User = Depends(require_role("tutor")),
    db: Session = Depends(get_db),
) -> TutorStudentListResponse:
    progress = ProgressService(db)
    students = []
    for s in UserService(db).students_for_tutor(current_user.uid):
        subjects = []
        for subject in subjects_for_tutor(parse_assignments(s.assignments), current_user.uid):
            chapters = progress.get_progress(s.uid, subject)
            subjects.append(
                TutorStudentSubject(subject=subject, completed_chapters=chapters, latest_chapter=latest_label(chapters))
            )
        students.append(
            TutorStudentResponse(
                uid=s.uid,
                custom_id=s.custom_id,
                name=s.name,
                class_level=s.class_level or "",
                permanent_class_link=s.permanent_class_link or None,
                subjects=subjects,
            )
        )
    return TutorStudentListResponse(students=students)
