"""Request/response schemas for the account ("me") endpoints. JSON uses camelCase keys."""

import re
from typing import Any

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from stepup.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_INPUT_MAX_LEN,
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_CHARACTER_CLASSES,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
)

USERNAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"

_CHARACTER_CLASSES = (
    re.compile(r"[A-Za-z]"),
    re.compile(r"[0-9]"),
    re.compile(r"[^A-Za-z0-9]"),
)


def password_meets_policy(password: str) -> bool:
    """Length within limits (characters and UTF-8 bytes) and at least two of: letters, digits, symbols."""
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        return False
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return False
    classes = sum(1 for pattern in _CHARACTER_CLASSES if pattern.search(password))
    return classes >= PASSWORD_MIN_CHARACTER_CLASSES


class CamelRequest(BaseModel):
    """Request body with camelCase JSON keys and snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PasswordVerifyRequest(BaseModel):
    """Current password, re-entered for step-up verification. Not policy-checked."""

    password: str = Field(..., max_length=PASSWORD_INPUT_MAX_LEN)


class PasswordSetRequest(BaseModel):
    """New password; must satisfy the password policy."""

    password: str

    @field_validator("password")
    @classmethod
    def validate_policy(cls, v: str) -> str:
        if not password_meets_policy(v):
            raise ValueError(
                f"Password requires {PASSWORD_MIN_LEN} to {PASSWORD_MAX_LEN} characters "
                f"(at most {PASSWORD_MAX_BYTES} bytes) and a mix of letters, numbers, and symbols."
            )
        return v


class ProfileUpdateRequest(CamelRequest):
    """Partial profile update. username/primaryEmail may be omitted but not null."""

    username: str | None = Field(
        default=None, max_length=USERNAME_MAX_LEN, pattern=USERNAME_PATTERN
    )
    primary_email: str | None = Field(
        default=None, max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN
    )
    name: str | None = Field(default=None, max_length=128)
    avatar: str | None = Field(default=None, max_length=2048)

    @field_validator("username", "primary_email", mode="before")
    @classmethod
    def reject_null_identifier(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("must be a string")
        return v

    @field_validator("avatar")
    @classmethod
    def validate_avatar(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return v
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError("avatar must be an http(s) URL or empty")
        return v

    def changes(self) -> dict[str, Any]:
        """Only the fields present in the request body."""
        return self.model_dump(exclude_unset=True)


class UserProfileResponse(BaseModel):
    """Profile of the authenticated user; never includes credential material. Read from the ORM user."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(serialization_alias=to_camel),
        from_attributes=True,
    )

    id: str
    username: str | None = None
    primary_email: str | None = None
    name: str | None = None
    avatar: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)
    is_suspended: bool = False
    has_password: bool = False
