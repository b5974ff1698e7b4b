"""ORM model for step-up verification records (one per user and browser session)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func

from stepup.models.base import Base

# Longer session cookies are treated as absent rather than stored.
SESSION_ID_MAX_LEN = 128


class VerificationStatus(Base):
    """
    Proof that a user re-entered their password within a browser session.

    Live while created_at + VERIFICATION_TTL_SECONDS is in the future.
    Re-verifying upserts the (user_id, session_id) row and resets created_at.
    """

    __tablename__ = "verification_statuses"
    __table_args__ = (UniqueConstraint("user_id", "session_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(21),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session_id = Column(String(SESSION_ID_MAX_LEN), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
