"""
Account endpoints for the authenticated user: profile, custom data, and
password verification / change gated by step-up verification.

Errors raised by the services (AccountError) are turned into responses by the
exception handler registered in stepup.main.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session

from stepup.api.v1.auth import get_current_user, get_session_id
from stepup.core.config import get_settings
from stepup.core.database import get_db
from stepup.schemas.account import (
    PasswordSetRequest,
    PasswordVerifyRequest,
    ProfileUpdateRequest,
    UserProfileResponse,
)
from stepup.schemas.auth import CurrentUser, ErrorResponse
from stepup.services.credentials import CredentialService
from stepup.services.profile import ProfileService
from stepup.services.users import UserRepository
from stepup.services.verification import VerificationStatusStore

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "Suspended user or missing session"},
        404: {"model": ErrorResponse, "description": "User not found"},
    }
)


def get_credential_service(db: Annotated[Session, Depends(get_db)]) -> CredentialService:
    """Dependency: credential service wired to this request's DB session."""
    settings = get_settings()
    return CredentialService(
        users=UserRepository(db),
        verifications=VerificationStatusStore.from_settings(db, settings),
        encryption_rounds=settings.BCRYPT_ROUNDS,
    )


def get_profile_service(db: Annotated[Session, Depends(get_db)]) -> ProfileService:
    return ProfileService(users=UserRepository(db))


@router.get("/", response_model=UserProfileResponse)
def get_profile(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    profiles: Annotated[ProfileService, Depends(get_profile_service)],
) -> UserProfileResponse:
    """Profile fields plus hasPassword. Readable even when the user is suspended."""
    return UserProfileResponse.model_validate(profiles.get_profile(user.id))


@router.patch("/", response_model=UserProfileResponse)
def patch_profile(
    body: ProfileUpdateRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    profiles: Annotated[ProfileService, Depends(get_profile_service)],
) -> UserProfileResponse:
    """Partial update of username, primaryEmail, name, avatar. 409 if username/email is taken."""
    updated = profiles.update_profile(user.id, body.changes())
    return UserProfileResponse.model_validate(updated)


@router.get("/custom-data")
def get_custom_data(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    profiles: Annotated[ProfileService, Depends(get_profile_service)],
) -> dict[str, Any]:
    return profiles.get_custom_data(user.id)


@router.patch("/custom-data")
def patch_custom_data(
    custom_data: Annotated[dict[str, Any], Body()],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    profiles: Annotated[ProfileService, Depends(get_profile_service)],
) -> dict[str, Any]:
    """Replace the custom data document; returns the stored document."""
    return profiles.update_custom_data(user.id, custom_data)


@router.post("/password/verify", status_code=status.HTTP_204_NO_CONTENT)
def post_password_verify(
    body: PasswordVerifyRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    session_id: Annotated[str | None, Depends(get_session_id)],
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
) -> Response:
    """
    Re-enter the current password. On success, sensitive changes are allowed
    from this browser session until the verification expires.
    """
    credentials.verify_password(user.id, session_id, body.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/password", status_code=status.HTTP_204_NO_CONTENT)
def post_password(
    body: PasswordSetRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    session_id: Annotated[str | None, Depends(get_session_id)],
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
) -> Response:
    """
    Set or change the password. Changing an existing password requires a prior
    POST /password/verify from the same session.
    """
    credentials.set_password(user.id, session_id, body.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
