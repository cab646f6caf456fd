"""Registration policy: admit a new member only when their email and phone are not already taken."""

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from membership.core.errors import DuplicateIdentity, PermanentlyBlocked
from membership.core.security import hash_password
from membership.schemas.user import (
    DEFAULT_ROLE,
    DEFAULT_STATUS,
    RegistrationCandidate,
    UserRecord,
    phone_key,
)
from membership.services.record_store import RecordStore

if TYPE_CHECKING:
    from membership.core.config import Settings

logger = logging.getLogger(__name__)


def check_identity_available(
    records: list[UserRecord],
    email: str,
    country_code: str,
    phone_number: str,
    exclude_id: str | None = None,
) -> None:
    """
    Raise DuplicateIdentity if a non-rejected record (other than exclude_id)
    already uses this email or exact country code + phone pair.
    """
    email_key = email.strip().casefold()
    candidate_phone = phone_key(country_code, phone_number)
    for record in records:
        if record.id == exclude_id or record.status == "rejected":
            continue
        if record.email_key == email_key:
            raise DuplicateIdentity("Email already registered.")
        if record.phone_key == candidate_phone:
            raise DuplicateIdentity("Phone Number already registered.")


def register_user(
    store: RecordStore,
    candidate: RegistrationCandidate,
    settings: "Settings",
    now: datetime | None = None,
) -> UserRecord:
    """
    Create a pending member from validated sign-up input.

    Raises DuplicateIdentity when a non-rejected record shares the email or
    phone, and PermanentlyBlocked when REJECTED_REREGISTRATION is "block" and a
    rejected record has the same email. Nothing is written on failure.
    """
    records = store.get_all()
    check_identity_available(
        records, candidate.email, candidate.country_code, candidate.phone_number
    )

    if settings.REJECTED_REREGISTRATION == "block":
        email_key = candidate.email.strip().casefold()
        if any(r.status == "rejected" and r.email_key == email_key for r in records):
            logger.info("Registration blocked for previously rejected email")
            raise PermanentlyBlocked(
                "This registration was rejected before. Please contact support."
            )

    record = UserRecord(
        id=str(uuid.uuid4()),
        full_name=candidate.full_name,
        email=candidate.email,
        country_code=candidate.country_code,
        phone_number=candidate.phone_number,
        credential=hash_password(candidate.password),
        role=DEFAULT_ROLE,
        status=DEFAULT_STATUS,
        created_at=now or datetime.now(UTC),
        instagram=candidate.instagram,
        tiktok=candidate.tiktok,
        facebook=candidate.facebook,
        id_card_image=candidate.id_card_image,
    )
    store.save(record)
    logger.info("Registered member: user_id=%s status=%s", record.id, record.status)
    return record
