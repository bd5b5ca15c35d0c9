"""
Chapter progress per student and subject.
Tutors edit the subjects they are assigned; students read their own; admins read all.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.progress_schemas import AppendChapterRequest, ProgressResponse
from api.schemas.user_schemas import User
from api.services.progress_service import ProgressService
from api.utils.auth import get_current_user, get_user_from_websocket, require_role
from api.utils.common import raise_for_result
from api.ws.class_broadcast import broadcast_progress, progress_feed_key, progress_snapshot, subscribe, unsubscribe
from scheduling.chapters import latest_label

progress_routes = APIRouter()


def _progress_response(student_id: str, subject: str, chapters: list[str]) -> ProgressResponse:
    return ProgressResponse(
        student_id=student_id,
        subject=subject,
        completed_chapters=chapters,
        latest_chapter=latest_label(chapters),
    )


def _can_read(user: User, student_id: str, subject: str, service: ProgressService) -> bool:
    if user.role == "admin":
        return True
    if user.role == "student":
        return user.uid == student_id
    return service.authorize_tutor(student_id, subject, user.uid).ok


@progress_routes.get("/progress/{student_id}/{subject}", response_model=ProgressResponse)
async def get_progress(
    student_id: str,
    subject: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProgressResponse:
    service = ProgressService(db)
    if not _can_read(current_user, student_id, subject, service):
        raise HTTPException(status_code=403, detail="Not allowed to view this progress")
    return _progress_response(student_id, subject, service.get_progress(student_id, subject))


@progress_routes.post("/progress/{student_id}/{subject}", response_model=ProgressResponse)
async def append_chapter(
    student_id: str,
    subject: str,
    req: AppendChapterRequest,
    current_user: User = Depends(require_role("tutor")),
    db: Session = Depends(get_db),
) -> ProgressResponse:
    """Record a completed chapter as "Ch {number}: {name}"."""
    service = ProgressService(db)
    raise_for_result(service.authorize_tutor(student_id, subject, current_user.uid))
    result = service.append_chapter(student_id, subject, req.chapter_number, req.chapter_name)
    raise_for_result(result)
    await broadcast_progress(student_id, subject, result.value)
    return _progress_response(student_id, subject, result.value)


@progress_routes.delete("/progress/{student_id}/{subject}", response_model=ProgressResponse)
async def remove_chapter(
    student_id: str,
    subject: str,
    chapter_label: str = Query(..., description='Exact label, e.g. "Ch 3: Kinematics"'),
    current_user: User = Depends(require_role("tutor")),
    db: Session = Depends(get_db),
) -> ProgressResponse:
    service = ProgressService(db)
    raise_for_result(service.authorize_tutor(student_id, subject, current_user.uid))
    result = service.remove_chapter(student_id, subject, chapter_label)
    raise_for_result(result)
    await broadcast_progress(student_id, subject, result.value)
    return _progress_response(student_id, subject, result.value)


@progress_routes.websocket("/ws/progress/{student_id}/{subject}")
async def progress_websocket(
    websocket: WebSocket,
    student_id: str,
    subject: str,
    db: Session = Depends(get_db),
):
    """Live chapter list for one student and subject. Auth: cookie access_token or query ?token=."""
    user = get_user_from_websocket(websocket, db)
    service = ProgressService(db)
    if user is None or not _can_read(user, student_id, subject, service):
        await websocket.close(code=1008)
        return
    key = progress_feed_key(student_id, subject)
    await websocket.accept()
    subscribe(key, websocket, user.timezone, uid=user.uid)
    try:
        await websocket.send_json(progress_snapshot(student_id, subject, service.get_progress(student_id, subject)))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe(key, websocket)
