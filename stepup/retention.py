"""
CLI entrypoint for the verification retention job. Run from cron, e.g.:

  python -m stepup.retention

Or hourly: 0 * * * * cd /path/to/stepup && .venv/bin/python -m stepup.retention
"""

import logging
import sys

from stepup.core.config import get_settings
from stepup.core.database import SessionLocal
from stepup.services.retention import run_retention

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run retention: delete verification records older than VERIFICATION_TTL_SECONDS."""
    settings = get_settings()
    db = SessionLocal()
    try:
        deleted = run_retention(db, settings)
        logger.info("Retention completed: verifications_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Retention job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
