"""
Login/logout and the caller's own profile.
"""

from fastapi import APIRouter, HTTPException, Response, status, Depends
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.auth_schemas import LoginRequest, LoginResponse, LogoutResponse
from api.schemas.user_schemas import (
    AssignmentSchema,
    MessageResponse,
    UpdateTimezoneRequest,
    User,
    UserProfileResponse,
)
from api.services.user_service import UserService
from api.utils.auth import authenticate_user, clear_auth_cookie, get_current_user, set_auth_cookie
from api.utils.common import raise_for_result
from api.utils.logger import configure_logging
from api.ws.class_broadcast import update_viewer_timezone
from scheduling.time_projection import REFERENCE_ZONE

auth_routes = APIRouter()
logger = configure_logging()


def profile_response(user) -> UserProfileResponse:
    return UserProfileResponse(
        uid=user.uid,
        custom_id=user.custom_id,
        email=user.email,
        name=user.name,
        role=user.role,
        timezone=user.timezone or REFERENCE_ZONE,
        class_level=user.class_level or "",
        syllabus=user.syllabus or "",
        permanent_class_link=user.permanent_class_link or "",
        subjects=list(user.subjects or []),
        assignments=[AssignmentSchema(**a) for a in (user.assignments or []) if isinstance(a, dict)],
    )


@auth_routes.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)) -> LoginResponse:
    """Authenticate user and set HTTP-only cookie with token."""
    user = authenticate_user(request.email.strip().lower(), request.password, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    set_auth_cookie(response, user)
    logger.info("login uid=%s role=%s", user.uid, user.role)
    return LoginResponse(message="Login successful", token_set=True)


@auth_routes.post("/logout", response_model=LogoutResponse)
def logout(response: Response) -> LogoutResponse:
    """Clear the authentication cookie."""
    clear_auth_cookie(response)
    return LogoutResponse(message="Logout successful")


@auth_routes.get("/me", response_model=UserProfileResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserProfileResponse:
    """The caller's profile, including the timezone used for class times."""
    user = UserService(db).get_user(current_user.uid)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return profile_response(user)


@auth_routes.put("/me/timezone", response_model=MessageResponse)
def update_my_timezone(
    req: UpdateTimezoneRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    result = UserService(db).set_timezone(current_user.uid, req.timezone)
    raise_for_result(result)
    update_viewer_timezone(current_user.uid, req.timezone)
    return MessageResponse(success=True, message=result.message)
