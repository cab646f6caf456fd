"""
Create or repair the default administrator. Run from project root:

  python -m membership.scripts.seed_admin

The application also does this on every start; the script is for fresh
databases (after `alembic upgrade head`) and for resetting a drifted admin.
"""

import argparse
import logging
import sys

from membership.core.config import get_settings
from membership.core.database import SessionLocal
from membership.core.errors import StorageUnavailable
from membership.services.bootstrap import ensure_admin_seed
from membership.services.record_store import RecordStore, SqlStorage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed or reconcile the default admin member.")
    parser.add_argument(
        "--storage-key",
        default=None,
        help="Storage key holding the member collection (defaults to STORAGE_KEY)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    key = args.storage_key or settings.STORAGE_KEY
    db = SessionLocal()
    try:
        outcome = ensure_admin_seed(RecordStore(SqlStorage(db), key), settings)
    except StorageUnavailable as e:
        logger.error("Admin seed failed: %s (cause: %s)", e.message, e.cause)
        return 1
    finally:
        db.close()
    logger.info("Admin seed %s: email=%s", outcome, settings.ADMIN_EMAIL)
    return 0


if __name__ == "__main__":
    sys.exit(main())
