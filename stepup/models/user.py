"""ORM model for user accounts: profile fields, stored credential and suspension flag."""

import secrets

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import JSONB

from stepup.models.base import Base

USER_ID_LENGTH = 21


def generate_user_id() -> str:
    """Opaque URL-safe identifier for a new user."""
    return secrets.token_urlsafe(16)[:USER_ID_LENGTH]


class User(Base):
    """
    User account owned by the persistence layer.

    password_encrypted and password_encryption_method are written together;
    the CHECK constraint rejects a row holding only one of them.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "(password_encrypted IS NULL) = (password_encryption_method IS NULL)",
            name="password_pair",
        ),
    )

    id = Column(String(USER_ID_LENGTH), primary_key=True, default=generate_user_id)
    username = Column(String(128), nullable=True)
    primary_email = Column(String(128), nullable=True)
    name = Column(String(128), nullable=True)
    avatar = Column(String(2048), nullable=True)
    password_encrypted = Column(String(255), nullable=True)
    password_encryption_method = Column(String(32), nullable=True)
    is_suspended = Column(Boolean, nullable=False, default=False, server_default="false")
    custom_data = Column(JSONB, nullable=False, default=dict, server_default="{}")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def has_password(self) -> bool:
        return bool(self.password_encrypted)


# Case-insensitive uniqueness for login identifiers.
Index("ix_users_username_lower", func.lower(User.username), unique=True)
Index("ix_users_primary_email_lower", func.lower(User.primary_email), unique=True)
