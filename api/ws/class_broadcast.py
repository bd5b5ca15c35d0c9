"""
In-memory WebSocket subscribers per feed key.

Feeds:
- "tutor:{uid}" / "student:{uid}" / "admin" -> class snapshots for that viewer
- "progress:{student_id}_{subject}"          -> one progress ledger

Every change pushes a full snapshot; a newer snapshot supersedes the older one,
so nothing is queued per subscriber. Each socket remembers whose it is, so a
profile timezone change applies to the next snapshot of an open feed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from fastapi import WebSocket
from sqlalchemy.orm import Session as DBSession

from api.models.class_session import ClassSession
from api.utils.common import class_to_response
from scheduling.chapters import latest_label
from scheduling.state_machine import sort_key

ADMIN_FEED = "admin"


@dataclass
class Viewer:
    uid: str = ""
    timezone: str = ""


# feed key -> {WebSocket: viewer}
_subscribers: dict[str, dict[WebSocket, Viewer]] = {}


def class_feed_key(role: str, uid: str) -> str:
    return ADMIN_FEED if role == "admin" else f"{role}:{uid}"


def progress_feed_key(student_id: str, subject: str) -> str:
    return f"progress:{student_id}_{subject}"


def subscribe(key: str, ws: WebSocket, timezone: str = "", uid: str = "") -> None:
    """Add a WebSocket to the subscriber set for this feed."""
    _subscribers.setdefault(key, {})[ws] = Viewer(uid=uid, timezone=timezone)


def unsubscribe(key: str, ws: WebSocket) -> None:
    """Remove a WebSocket from the subscriber set."""
    if key in _subscribers:
        _subscribers[key].pop(ws, None)
        if not _subscribers[key]:
            del _subscribers[key]


def has_subscribers(key: str) -> bool:
    return bool(_subscribers.get(key))


def update_viewer_timezone(uid: str, timezone: str) -> int:
    """Point every open socket of `uid` at its new timezone. Returns how many changed."""
    changed = 0
    for viewers in _subscribers.values():
        for viewer in viewers.values():
            if uid and viewer.uid == uid:
                viewer.timezone = timezone
                changed += 1
    return changed


def class_snapshot(classes: Iterable[ClassSession], timezone: str) -> dict[str, Any]:
    ordered = sorted(classes, key=lambda c: sort_key(c.class_date, c.class_time))
    return {
        "type": "classes",
        "timezone": timezone,
        "classes": [class_to_response(c, timezone).model_dump() for c in ordered],
    }


def progress_snapshot(student_id: str, subject: str, chapters: list[str]) -> dict[str, Any]:
    return {
        "type": "progress",
        "student_id": student_id,
        "subject": subject,
        "completed_chapters": chapters,
        "latest_chapter": latest_label(chapters),
    }


async def _send(key: str, build) -> None:
    if key not in _subscribers:
        return
    dead: set[WebSocket] = set()
    for ws, viewer in list(_subscribers[key].items()):
        try:
            await ws.send_json(build(viewer.timezone))
        except Exception:
            dead.add(ws)
    for ws in dead:
        unsubscribe(key, ws)


async def broadcast_classes(key: str, classes: list[ClassSession]) -> None:
    """Send each subscriber of `key` the class list projected into its own timezone."""
    await _send(key, lambda tz: class_snapshot(classes, tz))


async def broadcast_progress(student_id: str, subject: str, chapters: list[str]) -> None:
    snapshot = progress_snapshot(student_id, subject, chapters)
    await _send(progress_feed_key(student_id, subject), lambda _tz: snapshot)


async def publish_class_change(db: DBSession, *, student_id: str, tutor_id: Optional[str]) -> None:
    """Re-query and push fresh snapshots to every feed a changed class appears in."""
    feeds = [(f"student:{student_id}", ClassSession.student_id == student_id)]
    if tutor_id:
        feeds.append((f"tutor:{tutor_id}", ClassSession.tutor_id == tutor_id))
    feeds.append((ADMIN_FEED, None))
    for key, criterion in feeds:
        if not has_subscribers(key):
            continue
        query = db.query(ClassSession)
        if criterion is not None:
            query = query.filter(criterion)
        await broadcast_classes(key, query.all())
