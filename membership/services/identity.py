"""Identity resolution: match a login identifier (email or country code + phone) to a stored member."""

import logging

from membership.core.errors import (
    AccountDeactivated,
    AccountNotActive,
    AccountPending,
    AccountRejected,
)
from membership.core.security import create_access_token, verify_password
from membership.schemas.user import UserRecord
from membership.services.record_store import RecordStore

logger = logging.getLogger(__name__)

_NOT_ACTIVE: dict[str, type[AccountNotActive]] = {
    "pending": AccountPending,
    "rejected": AccountRejected,
    "deactive": AccountDeactivated,
}

_NOT_ACTIVE_MESSAGES = {
    "pending": "Your account is still being reviewed. Please wait for admin approval.",
    "rejected": "Your registration has been rejected. Please contact support for more information.",
    "deactive": "Your account has been deactivated. Please contact support.",
}


def _matches_identifier(record: UserRecord, identifier: str) -> bool:
    ident = identifier.strip()
    if not ident:
        return False
    if record.email_key == ident.casefold():
        return True
    return record.phone_key == "".join(ident.split())


def _candidates(store: RecordStore, identifier: str) -> list[UserRecord]:
    """Records matching identifier, live ones before rejected ones, storage order otherwise."""
    matches = [r for r in store.get_all() if _matches_identifier(r, identifier)]
    return [r for r in matches if r.status != "rejected"] + [
        r for r in matches if r.status == "rejected"
    ]


def resolve_identity(store: RecordStore, identifier: str) -> UserRecord | None:
    """
    Record whose email (case-insensitive) or phone key equals identifier; no credential check.

    A rejected record is returned only when no other record matches, so a
    re-registration is never shadowed by the application it replaced.
    """
    return next(iter(_candidates(store, identifier)), None)


def authenticate(store: RecordStore, identifier: str, credential: str) -> UserRecord | None:
    """Record matching identifier whose stored credential verifies, preferring non-rejected ones."""
    if not credential:
        return None
    for record in _candidates(store, identifier):
        if verify_password(credential, record.credential):
            return record
    return None


def ensure_can_sign_in(record: UserRecord) -> None:
    """Raise the matching AccountNotActive subclass unless record.status is active."""
    if record.status == "active":
        return
    error_cls = _NOT_ACTIVE.get(record.status, AccountNotActive)
    raise error_cls(_NOT_ACTIVE_MESSAGES.get(record.status, "Account is not active."))


def sign_in(store: RecordStore, identifier: str, credential: str) -> tuple[UserRecord, str] | None:
    """
    Authenticate and open a session for active members.

    Returns (record, access_token), or None when no record matches the
    identifier and credential. Raises AccountPending, AccountRejected or
    AccountDeactivated when the credentials match a record that may not sign in.
    """
    record = authenticate(store, identifier, credential)
    if record is None:
        logger.info("Sign-in failed: no matching identifier/credential")
        return None
    try:
        ensure_can_sign_in(record)
    except AccountNotActive:
        logger.info("Sign-in blocked: user_id=%s status=%s", record.id, record.status)
        raise
    token = create_access_token(sub=record.id, role=record.role)
    logger.info("Sign-in succeeded: user_id=%s role=%s", record.id, record.role)
    return record, token
