"""Data retention: delete step-up verification records whose TTL has elapsed."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from stepup.services.verification import VerificationStatusStore

if TYPE_CHECKING:
    from stepup.core.config import Settings

logger = logging.getLogger(__name__)


def run_retention(session: Session, settings: "Settings") -> int:
    """
    Delete expired verification records. Returns the number deleted.

    Expired records are already ignored by checks, so this only reclaims space.
    Idempotent: safe to run repeatedly.
    """
    if not settings.VERIFICATION_RETENTION_ENABLED:
        logger.info(
            "Retention is disabled (VERIFICATION_RETENTION_ENABLED=false); skipping."
        )
        return 0

    store = VerificationStatusStore.from_settings(session, settings)
    deleted_count = store.purge_expired()

    if deleted_count > 0:
        logger.info(
            "Retention run: ttl_seconds=%s, verifications_deleted=%s",
            settings.VERIFICATION_TTL_SECONDS,
            deleted_count,
        )
    return deleted_count
