"""
Class session schemas: scheduling, attendance, dashboard listings.
"""

from pydantic import BaseModel
from typing import Optional


class ScheduleClassRequest(BaseModel):
    student_id: str
    subject: str
    tutor_id: str
    class_date: str  # YYYY-MM-DD, IST
    class_time: str  # HH:MM, IST
    is_rescheduled: bool = False
    original_class_date: Optional[str] = None


class ScheduleClassResponse(BaseModel):
    success: bool
    message: str
    class_id: str


class ClassResponse(BaseModel):
    id: str
    student_id: str
    student_name: str
    tutor_id: str
    tutor_name: str
    subject: str
    class_date: str
    class_time: str
    status: str
    is_rescheduled: bool
    original_class_date: str = ""
    summary: str = ""
    created_at: Optional[str] = None
    # Viewer-relative fields
    display_date: str
    display_time: str
    is_due: bool = False


class ClassListResponse(BaseModel):
    timezone: str
    classes: list[ClassResponse]


class MarkAttendanceRequest(BaseModel):
    student_id: str
    status: str  # completed|missed
    summary: str = ""


class MissedClassOption(BaseModel):
    """A missed class an admin can pick as the reschedule target."""
    class_id: str
    class_date: str
    class_time: str
    tutor_name: str
    label: str


class MissedClassListResponse(BaseModel):
    options: list[MissedClassOption]


class ClassStatsResponse(BaseModel):
    total: int
    scheduled: int
    completed: int
    missed: int
    rescheduled: int
