"""Typed account errors. Each carries a stable code and the HTTP status the API maps it to."""


class AccountError(Exception):
    """Base class for failures surfaced to callers of the account services."""

    code = "account.error"
    status_code = 400
    default_message = "Account request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UserNotFoundError(AccountError):
    code = "entity.not_exists"
    status_code = 404
    default_message = "User not found."


class UserSuspendedError(AccountError):
    """Account is disabled; every mutating operation refuses."""

    code = "user.suspended"
    status_code = 401
    default_message = "User is suspended."


class SessionNotFoundError(AccountError):
    """No usable session identifier on a step-up gated request."""

    code = "session.not_found"
    status_code = 401
    default_message = "Session not found."


class VerificationRequiredError(AccountError):
    """No live step-up verification for this user and session."""

    code = "session.verification_failed"
    status_code = 422
    default_message = "Password verification is required before this change."


class PasswordMismatchError(AccountError):
    """Password re-entry did not match the stored credential."""

    code = "session.invalid_credentials"
    status_code = 422
    default_message = "Invalid credentials."


class IdentifierCollisionError(AccountError):
    """Username or email already belongs to another user."""

    status_code = 409

    def __init__(self, identifier: str, message: str | None = None) -> None:
        self.identifier = identifier
        self.code = f"user.{identifier}_already_in_use"
        super().__init__(message or f"This {identifier} is already in use.")


class StorageError(AccountError):
    """Persistence layer unreachable or a write failed; nothing was partially applied."""

    code = "storage.failure"
    status_code = 500
    default_message = "Storage operation failed."
