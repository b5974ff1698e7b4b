"""Schemas for the authenticated caller."""

from pydantic import BaseModel, ConfigDict


class CurrentUser(BaseModel):
    """Authenticated user resolved from the Bearer token, for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: str


class ErrorResponse(BaseModel):
    """Body returned for account errors: stable code plus human-readable message."""

    code: str
    message: str
