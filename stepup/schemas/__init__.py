"""Pydantic request/response schemas."""

from stepup.schemas.account import (
    PasswordSetRequest,
    PasswordVerifyRequest,
    ProfileUpdateRequest,
    UserProfileResponse,
)
from stepup.schemas.auth import CurrentUser, ErrorResponse
from stepup.schemas.health import HealthResponse

__all__ = [
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "PasswordSetRequest",
    "PasswordVerifyRequest",
    "ProfileUpdateRequest",
    "UserProfileResponse",
]
