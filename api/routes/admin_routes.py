"""
Privileged admin endpoints: account management and class scheduling.
Every route requires the admin role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.config import get_db
from api.routes.auth_routes import profile_response
from api.schemas.class_schemas import (
    ClassListResponse,
    ClassStatsResponse,
    MissedClassListResponse,
    MissedClassOption,
    ScheduleClassRequest,
    ScheduleClassResponse,
)
from api.schemas.user_schemas import (
    CreateUserRequest,
    CreateUserResponse,
    MessageResponse,
    UpdateUserRequest,
    User,
    UserProfileResponse,
)
from api.services.scheduling_service import RescheduleRequest, SchedulingService
from api.services.user_service import PROFILE_FIELDS, UserService
from api.utils.auth import require_role
from api.utils.common import class_to_response, raise_for_result
from api.utils.logger import configure_logging
from api.ws.class_broadcast import publish_class_change
from scheduling.time_projection import convert_to_12_hour

admin_routes = APIRouter()
logger = configure_logging()
require_admin = require_role("admin")


@admin_routes.post("/create-user", response_model=CreateUserResponse)
async def create_user(
    req: CreateUserRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> CreateUserResponse:
    """Create a student, tutor or admin account."""
    result = UserService(db).create_user(
        name=req.name,
        email=req.email,
        password=req.password,
        role=req.role,
        timezone=req.timezone,
        subjects=req.subjects,
        assignments=req.assignments,
        profile=req.model_dump(include=set(PROFILE_FIELDS)),
    )
    raise_for_result(result)
    user = result.value
    return CreateUserResponse(success=True, message=result.message, uid=user.uid, custom_id=user.custom_id)


@admin_routes.put("/update-user/{uid}", response_model=MessageResponse)
async def update_user(
    uid: str,
    req: UpdateUserRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    result = UserService(db).update_user(
        uid,
        name=req.name,
        email=req.email,
        timezone=req.timezone,
        subjects=req.subjects,
        assignments=req.assignments,
        profile=req.model_dump(include=set(PROFILE_FIELDS)),
    )
    raise_for_result(result)
    return MessageResponse(success=True, message=result.message)


@admin_routes.delete("/delete-user/{uid}", response_model=MessageResponse)
async def delete_user(
    uid: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a user, their classes (as a student) and their progress."""
    result = UserService(db).delete_user(uid, acting_uid=current_user.uid)
    raise_for_result(result)
    await publish_class_change(db, student_id=uid, tutor_id=None)
    return MessageResponse(success=True, message=result.message)


@admin_routes.get("/users", response_model=list[UserProfileResponse])
async def list_users(
    role: Optional[str] = Query(None, description="Filter by role: admin, tutor, student"),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[UserProfileResponse]:
    return [profile_response(u) for u in UserService(db).list_users(role)]


@admin_routes.post("/schedule-class", response_model=ScheduleClassResponse)
async def schedule_class(
    req: ScheduleClassRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ScheduleClassResponse:
    """Schedule a class (date and time in IST) for a student's assigned subject."""
    reschedule = RescheduleRequest(req.original_class_date or "") if req.is_rescheduled else None
    result = SchedulingService(db).schedule_session(
        req.student_id,
        req.subject,
        req.tutor_id,
        req.class_date,
        req.class_time,
        reschedule=reschedule,
    )
    raise_for_result(result)
    session = result.value
    await publish_class_change(db, student_id=session.student_id, tutor_id=session.tutor_id)
    return ScheduleClassResponse(success=True, message=result.message, class_id=session.id)


@admin_routes.delete("/class/{class_id}", response_model=MessageResponse)
async def delete_class(
    class_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    result = SchedulingService(db).delete_session(class_id)
    raise_for_result(result)
    session = result.value
    await publish_class_change(db, student_id=session.student_id, tutor_id=session.tutor_id)
    return MessageResponse(success=True, message=result.message)


@admin_routes.get("/students/{uid}/missed-classes", response_model=MissedClassListResponse)
async def missed_classes(
    uid: str,
    subject: str = Query(..., description="Subject of the class being rescheduled"),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MissedClassListResponse:
    """Options for the reschedule dropdown: missed classes of this student in this subject."""
    targets = SchedulingService(db).list_reschedule_targets(uid, subject)
    return MissedClassListResponse(
        options=[
            MissedClassOption(
                class_id=c.id,
                class_date=c.class_date,
                class_time=c.class_time,
                tutor_name=c.tutor_name or "",
                label=f"{c.class_date} at {convert_to_12_hour(c.class_time)} ({c.tutor_name})",
            )
            for c in targets
        ]
    )


@admin_routes.get("/students/{uid}/class-stats", response_model=ClassStatsResponse)
async def class_stats(
    uid: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ClassStatsResponse:
    return ClassStatsResponse(**SchedulingService(db).class_stats(uid))


@admin_routes.get("/classes", response_model=ClassListResponse)
async def all_classes(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ClassListResponse:
    classes = SchedulingService(db).classes_for_viewer(current_user.uid, "admin")
    return ClassListResponse(
        timezone=current_user.timezone,
        classes=[class_to_response(c, current_user.timezone) for c in classes],
    )
