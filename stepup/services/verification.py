"""
Step-up verification records: short-lived proof that a user re-entered their
password within a browser session.

One row per (user_id, session_id). Creating a record again for the same pair
replaces it and restarts the TTL. check() never deletes; after the gated change
has been written the caller calls consume(), which deletes the record only when
the store is built with single_use=True.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stepup.core.errors import StorageError, VerificationRequiredError
from stepup.models.verification_status import VerificationStatus

if TYPE_CHECKING:
    from stepup.core.config import Settings

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class VerificationStore(Protocol):
    """What the credential service needs from the step-up store."""

    def create(self, user_id: str, session_id: str) -> None: ...

    def check(self, user_id: str, session_id: str) -> None: ...

    def consume(self, user_id: str, session_id: str) -> None: ...


class VerificationStatusStore:
    """VerificationStore persisted in the verification_statuses table."""

    def __init__(
        self,
        db: Session,
        ttl_seconds: int,
        single_use: bool = False,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.db = db
        self.ttl = timedelta(seconds=ttl_seconds)
        self.single_use = single_use
        self._now = now or utc_now

    @classmethod
    def from_settings(cls, db: Session, settings: "Settings") -> "VerificationStatusStore":
        return cls(
            db,
            ttl_seconds=settings.VERIFICATION_TTL_SECONDS,
            single_use=settings.VERIFICATION_SINGLE_USE,
        )

    def is_live(self, created_at: datetime) -> bool:
        """A record is live strictly before created_at + ttl."""
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return self._now() < created_at + self.ttl

    def create(self, user_id: str, session_id: str) -> None:
        """Insert or replace the record for (user_id, session_id)."""
        created_at = self._now()
        stmt = insert(VerificationStatus).values(
            user_id=user_id,
            session_id=session_id,
            created_at=created_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[VerificationStatus.user_id, VerificationStatus.session_id],
            set_={"created_at": stmt.excluded.created_at},
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to store verification status", extra={"user_id": user_id})
            raise StorageError() from e
        logger.info(
            "Verification status created",
            extra={"user_id": user_id, "expires_at": (created_at + self.ttl).isoformat()},
        )

    def check(self, user_id: str, session_id: str) -> None:
        """Raise VerificationRequiredError unless a live record exists for the pair."""
        try:
            record = (
                self.db.query(VerificationStatus)
                .filter(
                    VerificationStatus.user_id == user_id,
                    VerificationStatus.session_id == session_id,
                )
                .first()
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to read verification status", extra={"user_id": user_id})
            raise StorageError() from e

        if record is None or not self.is_live(record.created_at):
            logger.info(
                "Verification status missing or expired",
                extra={"user_id": user_id, "found": record is not None},
            )
            raise VerificationRequiredError()

    def consume(self, user_id: str, session_id: str) -> None:
        """Spend the record for the pair once the change it gated is stored. No-op unless single_use."""
        if not self.single_use:
            return
        try:
            (
                self.db.query(VerificationStatus)
                .filter(
                    VerificationStatus.user_id == user_id,
                    VerificationStatus.session_id == session_id,
                )
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to consume verification status", extra={"user_id": user_id})
            raise StorageError() from e

    def purge_expired(self) -> int:
        """Delete every record whose TTL has elapsed. Returns the number deleted."""
        cutoff = self._now() - self.ttl
        deleted_count = (
            self.db.query(VerificationStatus)
            .filter(VerificationStatus.created_at <= cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted_count
