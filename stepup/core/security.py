"""JWT creation/verification for authenticating the calling user, plus credential policy limits."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from stepup.core.config import settings

# Password policy enforced at the route layer (schemas), never re-checked by services.
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 72
# bcrypt reads at most 72 bytes, so the limit also applies to the UTF-8 encoding.
PASSWORD_MAX_BYTES = 72
# Upper bound on a re-entered password; legacy credentials may predate the current limit.
PASSWORD_INPUT_MAX_LEN = 256
PASSWORD_MIN_CHARACTER_CLASSES = 2

USERNAME_MAX_LEN = 128
EMAIL_MAX_LEN = 128


def create_access_token(sub: str) -> str:
    """Create a JWT access token whose sub is the user id."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
