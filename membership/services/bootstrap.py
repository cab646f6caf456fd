"""Session bootstrap: make sure exactly one well-formed default administrator exists."""

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

from membership.core.security import hash_password, verify_password
from membership.schemas.user import UserRecord
from membership.services.record_store import RecordStore

if TYPE_CHECKING:
    from membership.core.config import Settings

logger = logging.getLogger(__name__)

SeedOutcome = Literal["created", "reconciled", "unchanged"]


def ensure_admin_seed(store: RecordStore, settings: "Settings") -> SeedOutcome:
    """
    Create the reserved administrator if missing, otherwise force it back to
    role admin, status active and the configured initial password.

    Idempotent: repeated calls never add a second record for ADMIN_EMAIL. If
    concurrent writers already produced duplicates, the first one is kept and
    the rest are dropped.
    """
    admin_key = settings.ADMIN_EMAIL.strip().casefold()
    initial_password = settings.ADMIN_INITIAL_PASSWORD.get_secret_value()
    records = store.get_all()
    matches = [r for r in records if r.email_key == admin_key]

    if not matches:
        admin = UserRecord(
            id=str(uuid.uuid4()),
            full_name=settings.ADMIN_FULL_NAME,
            email=settings.ADMIN_EMAIL,
            country_code=settings.ADMIN_COUNTRY_CODE,
            phone_number=settings.ADMIN_PHONE_NUMBER,
            credential=hash_password(initial_password),
            role="admin",
            status="active",
            created_at=datetime.now(UTC),
        )
        store.save(admin)
        logger.info("Default admin created: email=%s", settings.ADMIN_EMAIL)
        return "created"

    admin = matches[0]
    changes: dict[str, str] = {}
    if admin.role != "admin":
        changes["role"] = "admin"
    if admin.status != "active":
        changes["status"] = "active"
    if not verify_password(initial_password, admin.credential):
        changes["credential"] = hash_password(initial_password)

    duplicates = len(matches) - 1
    if not changes and not duplicates:
        return "unchanged"

    reconciled = admin.model_copy(update=changes)
    kept: list[UserRecord] = []
    for r in records:
        if r.email_key != admin_key:
            kept.append(r)
        elif r is admin:
            kept.append(reconciled)
    store.replace_all(kept)
    if duplicates:
        logger.warning("Dropped %s duplicate default admin record(s)", duplicates)
    logger.info(
        "Default admin reconciled: fields=%s",
        sorted(changes),
    )
    return "reconciled"
