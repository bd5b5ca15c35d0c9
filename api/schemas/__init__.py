"""
API schemas package. Import from submodules or from this package.

Example:
    from api.schemas import ClassResponse, ScheduleClassRequest
    from api.schemas.class_schemas import ClassResponse
"""

from api.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
)
from api.schemas.user_schemas import (
    User,
    AssignmentSchema,
    CreateUserRequest,
    UpdateUserRequest,
    CreateUserResponse,
    MessageResponse,
    UpdateTimezoneRequest,
    UserProfileResponse,
    TutorStudentSubject,
    TutorStudentResponse,
    TutorStudentListResponse,
)
from api.schemas.class_schemas import (
    ScheduleClassRequest,
    ScheduleClassResponse,
    ClassResponse,
    ClassListResponse,
    MarkAttendanceRequest,
    MissedClassOption,
    MissedClassListResponse,
    ClassStatsResponse,
)
from api.schemas.progress_schemas import (
    AppendChapterRequest,
    ProgressResponse,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    # user
    "User",
    "AssignmentSchema",
    "CreateUserRequest",
    "UpdateUserRequest",
    "CreateUserResponse",
    "MessageResponse",
    "UpdateTimezoneRequest",
    "UserProfileResponse",
    "TutorStudentSubject",
    "TutorStudentResponse",
    "TutorStudentListResponse",
    # classes
    "ScheduleClassRequest",
    "ScheduleClassResponse",
    "ClassResponse",
    "ClassListResponse",
    "MarkAttendanceRequest",
    "MissedClassOption",
    "MissedClassListResponse",
    "ClassStatsResponse",
    # progress
    "AppendChapterRequest",
    "ProgressResponse",
]
