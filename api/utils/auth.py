from typing import Callable, Optional
from fastapi import HTTPException, Cookie, Response, status, Depends
from fastapi import WebSocket
from sqlalchemy.orm import Session

from api.config import get_db, get_settings
from api.models.models import User as DbUser
from api.schemas.user_schemas import User
from api.utils.jwt import verify_token, create_access_token, verify_password
from api.utils.logger import configure_logging
from scheduling.time_projection import REFERENCE_ZONE

logger = configure_logging()


def _token_from_ws_scope(scope: dict) -> Optional[str]:
    """Extract access_token from Cookie or query (?token=) in WebSocket scope. Returns None if missing."""
    qs = scope.get("query_string") or b""
    if qs:
        for part in qs.split(b"&"):
            if part.startswith(b"token="):
                return part[6:].decode("utf-8", errors="replace").strip()
    for name, value in scope.get("headers") or []:
        if name.lower() == b"cookie":
            cookie = value.decode("utf-8", errors="replace")
            for part in cookie.split(";"):
                part = part.strip()
                if part.startswith("access_token="):
                    return part[13:].strip()
            break
    return None


def to_caller(user: DbUser) -> User:
    return User(
        uid=user.uid,
        email=user.email,
        name=user.name,
        role=user.role,
        timezone=user.timezone or REFERENCE_ZONE,
    )


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> User:
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
        )

    payload = verify_token(access_token)
    user = get_user_by_email(payload.sub, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return to_caller(user)


def require_role(*roles: str) -> Callable[..., User]:
    """Dependency factory: the caller must hold one of `roles`."""

    def _guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning("role check failed uid=%s role=%s required=%s", current_user.uid, current_user.role, roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{' or '.join(r.capitalize() for r in roles)} role required",
            )
        return current_user

    return _guard


def set_auth_cookie(response: Response, user: DbUser) -> None:
    max_age = get_settings().access_token_expire_minutes * 60
    response.set_cookie(
        key="access_token",
        value=create_access_token(user.email, role=user.role),
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=max_age,
    )

def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )

def get_user_from_websocket(websocket: WebSocket, db: Session) -> Optional[User]:
    """Resolve the caller of a WebSocket (cookie or query token). Returns None if unauthenticated."""
    token = _token_from_ws_scope(websocket.scope)
    if not token:
        return None
    try:
        payload = verify_token(token)
    except HTTPException:
        return None
    user = get_user_by_email(payload.sub, db)
    if user is None:
        return None
    return to_caller(user)


def get_user_by_email(email: str, db: Session) -> Optional[DbUser]:
    return db.query(DbUser).filter(DbUser.email == email).first()


def authenticate_user(email: str, password: str, db: Session) -> Optional[DbUser]:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
