from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import HTTPException, status
from jose import JWTError
from jose.jwt import encode, decode

from api.config import get_settings
from api.schemas.auth_schemas import AuthTokenPayload
from api.utils.logger import configure_logging

ALGORITHM = "HS256"

logger = configure_logging()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("password check failed: malformed hash")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password for storing."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(sub: str, role: Optional[str] = None) -> str:
    """Create a JWT access token for a user email."""
    settings = get_settings()
    payload = AuthTokenPayload(
        sub=sub,
        role=role,
        exp=datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes),
    )
    return encode(payload.model_dump(exclude_none=True), settings.secret_key, algorithm=ALGORITHM)


def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    try:
        payload = decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
        return AuthTokenPayload(**payload)
    except JWTError as e:
        logger.warning("token rejected: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
