"""
User, profile and assignment schemas.
"""

from pydantic import BaseModel
from typing import Literal, Optional


Role = Literal["admin", "tutor", "student"]


class User(BaseModel):
    """The authenticated caller, as resolved from the access token."""
    uid: str
    email: str
    name: str
    role: str
    timezone: str


class AssignmentSchema(BaseModel):
    subject: str
    tutor_id: str
    tutor_name: str = ""


class CreateUserRequest(BaseModel):
    name: str
    email: str
    password: str
    role: str
    timezone: Optional[str] = None
    contact_number: str = ""
    class_level: str = ""
    emergency_contact: str = ""
    qualifications: str = ""
    hourly_rate: str = ""
    syllabus: str = ""
    medium_of_communication: str = ""
    permanent_class_link: str = ""
    subjects: list[str] = []
    assignments: list[AssignmentSchema] = []


class UpdateUserRequest(BaseModel):
    name: str
    email: str
    timezone: Optional[str] = None
    contact_number: str = ""
    class_level: str = ""
    emergency_contact: str = ""
    qualifications: str = ""
    hourly_rate: str = ""
    syllabus: str = ""
    medium_of_communication: str = ""
    permanent_class_link: str = ""
    subjects: list[str] = []
    assignments: list[AssignmentSchema] = []


class CreateUserResponse(BaseModel):
    success: bool
    message: str
    uid: str
    custom_id: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool
    message: str


class UpdateTimezoneRequest(BaseModel):
    timezone: str


class UserProfileResponse(BaseModel):
    uid: str
    custom_id: Optional[str] = None
    email: str
    name: str
    role: str
    timezone: str
    class_level: str = ""
    syllabus: str = ""
    permanent_class_link: str = ""
    subjects: list[str] = []
    assignments: list[AssignmentSchema] = []


class TutorStudentSubject(BaseModel):
    """One subject a tutor teaches a student, with progress so far."""
    subject: str
    completed_chapters: list[str]
    latest_chapter: Optional[str] = None


class TutorStudentResponse(BaseModel):
    uid: str
    custom_id: Optional[str] = None
    name: str
    class_level: str = ""
    permanent_class_link: Optional[str] = None
    subjects: list[TutorStudentSubject]


class TutorStudentListResponse(BaseModel):
    students: list[TutorStudentResponse]
