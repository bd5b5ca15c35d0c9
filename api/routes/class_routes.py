"""
Tutor and student class views: listing, attendance, live feed.

Class times are stored in IST; every response carries display_date /
display_time projected into the caller's profile timezone.
"""

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.class_schemas import ClassListResponse, ClassResponse, MarkAttendanceRequest
from api.schemas.user_schemas import User
from api.services.attendance_service import AttendanceService
from api.services.scheduling_service import SchedulingService
from api.utils.auth import get_current_user, get_user_from_websocket, require_role
from api.utils.common import class_to_response, raise_for_result
from api.utils.logger import configure_logging
from api.ws.class_broadcast import class_feed_key, class_snapshot, publish_class_change, subscribe, unsubscribe

class_routes = APIRouter()
logger = configure_logging()


@class_routes.get("/classes", response_model=ClassListResponse)
async def list_my_classes(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ClassListResponse:
    """Classes of the caller (as tutor or student), ascending by date and time."""
    classes = SchedulingService(db).classes_for_viewer(current_user.uid, current_user.role)
    return ClassListResponse(
        timezone=current_user.timezone,
        classes=[class_to_response(c, current_user.timezone) for c in classes],
    )


@class_routes.post("/classes/{class_id}/attendance", response_model=ClassResponse)
async def mark_attendance(
    class_id: str,
    req: MarkAttendanceRequest,
    current_user: User = Depends(require_role("tutor")),
    db: Session = Depends(get_db),
) -> ClassResponse:
    """Mark a scheduled class completed (summary required) or missed (reason optional)."""
    result = AttendanceService(db).mark_attendance(
        class_id,
        req.student_id,
        req.status,
        req.summary,
        tutor_id=current_user.uid,
    )
    raise_for_result(result)
    session = result.value
    await publish_class_change(db, student_id=session.student_id, tutor_id=session.tutor_id)
    return class_to_response(session, current_user.timezone)


@class_routes.websocket("/ws/classes")
async def classes_websocket(
    websocket: WebSocket,
    db: Session = Depends(get_db),
):
    """
    Live class list for the caller. Sends the current snapshot on connect and a
    fresh one whenever a class in the caller's view changes.
    Auth: cookie access_token or query ?token=.
    """
    user = get_user_from_websocket(websocket, db)
    if user is None:
        await websocket.close(code=1008)
        return
    key = class_feed_key(user.role, user.uid)
    await websocket.accept()
    subscribe(key, websocket, user.timezone, uid=user.uid)
    try:
        classes = SchedulingService(db).classes_for_viewer(user.uid, user.role)
        await websocket.send_json(class_snapshot(classes, user.timezone))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe(key, websocket)
