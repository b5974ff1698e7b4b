"""SQLAlchemy ORM models."""

from stepup.models.base import Base
from stepup.models.user import User
from stepup.models.verification_status import VerificationStatus

__all__ = ["Base", "User", "VerificationStatus"]
