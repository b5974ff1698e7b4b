"""User record store: lookups, atomic updates and identifier collision checks."""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stepup.core.errors import IdentifierCollisionError, StorageError, UserNotFoundError
from stepup.models.user import User

logger = logging.getLogger(__name__)

# Fields a user may change on their own profile.
PROFILE_FIELDS = ("username", "primary_email", "name", "avatar")

# Identifier column -> name used in collision error codes.
IDENTIFIER_FIELDS = {"username": "username", "primary_email": "email"}


class UserStore(Protocol):
    """What the account services need from persistence."""

    def find_user_by_id(self, user_id: str) -> User: ...

    def update_user_by_id(self, user_id: str, changes: Mapping[str, Any]) -> User: ...

    def check_identifier_collision(
        self, changes: Mapping[str, Any], exclude_user_id: str
    ) -> None: ...


def _collision_from_integrity_error(exc: IntegrityError) -> IdentifierCollisionError | None:
    """Map a unique-index violation on username/email (concurrent update) to a collision."""
    text = str(exc.orig)
    if "ix_users_username_lower" in text:
        return IdentifierCollisionError("username")
    if "ix_users_primary_email_lower" in text:
        return IdentifierCollisionError("email")
    return None


class UserRepository:
    """SQLAlchemy-backed UserStore bound to one request's session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_user_by_id(self, user_id: str) -> User:
        """Return the user or raise UserNotFoundError."""
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            logger.exception("User lookup failed", extra={"user_id": user_id})
            raise StorageError() from e
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found.")
        return user

    def update_user_by_id(self, user_id: str, changes: Mapping[str, Any]) -> User:
        """
        Apply all changes in one UPDATE and commit.

        On any database error the transaction is rolled back, so no subset of
        the changes (e.g. half of a credential pair) is ever persisted.
        """
        user = self.find_user_by_id(user_id)
        for key, value in changes.items():
            setattr(user, key, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            collision = _collision_from_integrity_error(e)
            if collision is not None:
                raise collision from e
            logger.exception("User update violated a constraint", extra={"user_id": user_id})
            raise StorageError() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("User update failed", extra={"user_id": user_id})
            raise StorageError() from e
        self.db.refresh(user)
        return user

    def check_identifier_collision(
        self, changes: Mapping[str, Any], exclude_user_id: str
    ) -> None:
        """
        Raise IdentifierCollisionError if a new username or email already belongs
        to another user. Comparison is case-insensitive.
        """
        for field, identifier in IDENTIFIER_FIELDS.items():
            value = changes.get(field)
            if not value:
                continue
            column = getattr(User, field)
            try:
                taken = (
                    self.db.query(User.id)
                    .filter(func.lower(column) == value.lower(), User.id != exclude_user_id)
                    .first()
                )
            except SQLAlchemyError as e:
                logger.exception("Identifier lookup failed", extra={"field": field})
                raise StorageError() from e
            if taken is not None:
                raise IdentifierCollisionError(identifier)
