"""
Credential lifecycle: password verification (step-up) and password changes.

Checks run in the same order for both operations:
user lookup, suspension, session, then the credential itself. A missing
session is therefore reported even for users without a password.
"""

import logging

from stepup.core.errors import (
    PasswordMismatchError,
    SessionNotFoundError,
    StorageError,
    UserSuspendedError,
)
from stepup.models.user import User
from stepup.models.verification_status import SESSION_ID_MAX_LEN
from stepup.services.passwords import (
    EncryptedCredential,
    PasswordTooLongError,
    encrypt_password,
    needs_rehash,
    verify_password,
)
from stepup.services.users import UserStore
from stepup.services.verification import VerificationStore

logger = logging.getLogger(__name__)


def stored_credential(user: User) -> EncryptedCredential | None:
    """The user's stored credential, or None when no password is set."""
    if not user.password_encrypted:
        return None
    return EncryptedCredential(
        method=user.password_encryption_method,
        cipher_text=user.password_encrypted,
    )


def credential_changes(credential: EncryptedCredential) -> dict[str, str]:
    """Column values for a credential; always both halves together."""
    return {
        "password_encrypted": credential.cipher_text,
        "password_encryption_method": credential.method.value,
    }


class CredentialService:
    """Gates password verification and changes; collaborators are injected per request."""

    def __init__(
        self,
        users: UserStore,
        verifications: VerificationStore,
        encryption_rounds: int | None = None,
    ) -> None:
        self.users = users
        self.verifications = verifications
        self.encryption_rounds = encryption_rounds

    def _find_active_user(self, user_id: str) -> User:
        user = self.users.find_user_by_id(user_id)
        if user.is_suspended:
            raise UserSuspendedError()
        return user

    @staticmethod
    def _require_session(session_id: str | None) -> str:
        if session_id is None or not session_id.strip() or len(session_id) > SESSION_ID_MAX_LEN:
            raise SessionNotFoundError()
        return session_id

    def verify_password(self, user_id: str, session_id: str | None, password: str) -> None:
        """
        Confirm the user's current password and record a step-up verification
        for (user_id, session_id). No record is created on mismatch.
        """
        user = self._find_active_user(user_id)
        session_id = self._require_session(session_id)

        credential = stored_credential(user)
        if credential is None or not verify_password(credential, password):
            logger.info("Password verification failed", extra={"user_id": user_id})
            raise PasswordMismatchError()

        if needs_rehash(credential):
            self._upgrade_credential(user_id, password, credential)

        self.verifications.create(user_id, session_id)

    def set_password(self, user_id: str, session_id: str | None, password: str) -> None:
        """
        Replace the user's password.

        A first password (none stored yet) needs no step-up verification;
        changing an existing one requires a live verification for this session.
        The verification is consumed only after the new credential is stored.
        """
        user = self._find_active_user(user_id)
        session_id = self._require_session(session_id)

        step_up = stored_credential(user) is not None
        if step_up:
            self.verifications.check(user_id, session_id)

        credential = encrypt_password(password, rounds=self.encryption_rounds)
        self.users.update_user_by_id(user_id, credential_changes(credential))
        if step_up:
            self._consume_verification(user_id, session_id)
        logger.info(
            "Password set",
            extra={"user_id": user_id, "method": credential.method.value},
        )

    def _consume_verification(self, user_id: str, session_id: str) -> None:
        try:
            self.verifications.consume(user_id, session_id)
        except StorageError:
            # The new password is already stored; the record still expires by TTL.
            logger.warning("Verification status not consumed", extra={"user_id": user_id})

    def _upgrade_credential(
        self, user_id: str, password: str, old: EncryptedCredential
    ) -> None:
        """Re-encrypt a verified legacy credential with the current method."""
        try:
            credential = encrypt_password(password, rounds=self.encryption_rounds)
        except PasswordTooLongError:
            logger.info(
                "Legacy credential kept; password too long for the current method",
                extra={"user_id": user_id, "from_method": old.method},
            )
            return
        try:
            self.users.update_user_by_id(user_id, credential_changes(credential))
        except StorageError:
            # The old credential is still intact and valid; retry on next verification.
            logger.warning(
                "Legacy credential upgrade failed",
                extra={"user_id": user_id, "from_method": old.method},
            )
            return
        logger.info(
            "Legacy credential upgraded",
            extra={"user_id": user_id, "from_method": old.method},
        )
