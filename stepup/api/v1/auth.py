"""Auth dependencies: resolve the caller from the Bearer JWT and the browser session from its cookie."""

from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from stepup.core.config import get_settings
from stepup.core.database import get_db
from stepup.core.security import decode_access_token
from stepup.models.user import User
from stepup.models.verification_status import SESSION_ID_MAX_LEN
from stepup.schemas.auth import CurrentUser

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise _unauthorized("Invalid token payload")
    user_id = db.query(User.id).filter(User.id == sub).scalar()
    if user_id is None:
        raise _unauthorized("User not found")
    return CurrentUser(id=user_id)


def get_session_id(request: Request) -> str | None:
    """Dependency: browser session id from the session cookie, or None when absent or over-long."""
    session_id = request.cookies.get(get_settings().SESSION_COOKIE_NAME)
    if session_id is None or not session_id.strip():
        return None
    if len(session_id) > SESSION_ID_MAX_LEN:
        return None
    return session_id
