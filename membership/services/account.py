"""Self-service account changes: password reset, password change, contact phone update."""

import logging

from membership.core.errors import InvalidCredential, RecordNotFound
from membership.core.passwords import password_policy_violation
from membership.core.security import hash_password, verify_password
from membership.schemas.user import UserRecord, phone_key
from membership.services.identity import resolve_identity
from membership.services.record_store import RecordStore
from membership.services.registration import check_identity_available

logger = logging.getLogger(__name__)


def _check_new_password(new_password: str, confirm_password: str) -> None:
    reason = password_policy_violation(new_password)
    if reason:
        raise InvalidCredential(reason)
    if new_password != confirm_password:
        raise InvalidCredential("Password confirmation does not match.")


def reset_credential(
    store: RecordStore,
    identifier: str,
    new_password: str,
    confirm_password: str,
) -> UserRecord:
    """Forgot-password flow: find the member by email or phone and set a new password."""
    record = resolve_identity(store, identifier)
    if record is None:
        raise RecordNotFound("No user found for that email/phone. Please register first.")
    _check_new_password(new_password, confirm_password)
    updated = store.update(record.id, credential=hash_password(new_password))
    logger.info("Password reset: user_id=%s", record.id)
    return updated


def change_credential(
    store: RecordStore,
    record_id: str,
    current_password: str,
    new_password: str,
    confirm_password: str,
) -> UserRecord:
    record = store.get(record_id)
    if not verify_password(current_password, record.credential):
        raise InvalidCredential("Current password is incorrect.")
    _check_new_password(new_password, confirm_password)
    updated = store.update(record_id, credential=hash_password(new_password))
    logger.info("Password changed: user_id=%s", record_id)
    return updated


def update_phone(
    store: RecordStore,
    record_id: str,
    country_code: str,
    phone_number: str,
) -> tuple[UserRecord, bool]:
    """
    Change the member's contact phone. Returns (record, changed).

    Raises DuplicateIdentity if another non-rejected member already uses the number.
    """
    records = store.get_all()
    record = next((r for r in records if r.id == record_id), None)
    if record is None:
        raise RecordNotFound(f"Member '{record_id}' not found.")
    phone_number = "".join(phone_number.split())
    if record.phone_key == phone_key(country_code, phone_number):
        return record, False
    check_identity_available(
        records,
        record.email,
        country_code,
        phone_number,
        exclude_id=record_id,
    )
    updated = store.update(record_id, country_code=country_code, phone_number=phone_number)
    logger.info("Phone updated: user_id=%s", record_id)
    return updated, True
