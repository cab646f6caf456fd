"""
Member management for administrators: listing, status and role changes, deletion, statistics.

Status changes follow a fixed graph, driven only by administrator action:

    pending  -> active | rejected | deactive
    active   -> deactive
    deactive -> active
    rejected -> (terminal)

Setting a field to its current value is a no-op: nothing is written and the
caller is told nothing changed.
"""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from membership.core.errors import InvalidTransition, ProtectedRecord, RecordNotFound
from membership.schemas.user import (
    LEGACY_STATUS_ALIASES,
    ROLE_VALUES,
    STATUS_VALUES,
    UserRecord,
)
from membership.services.record_store import RecordStore

if TYPE_CHECKING:
    from membership.core.config import Settings

logger = logging.getLogger(__name__)

ALLOWED_STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"active", "rejected", "deactive"}),
    "active": frozenset({"deactive"}),
    "deactive": frozenset({"active"}),
    "rejected": frozenset(),
}


def is_seeded_admin(record: UserRecord, settings: "Settings") -> bool:
    return record.email_key == settings.ADMIN_EMAIL.strip().casefold()


def _get_or_raise(records: list[UserRecord], record_id: str) -> UserRecord:
    for record in records:
        if record.id == record_id:
            return record
    raise RecordNotFound(f"Member '{record_id}' not found.")


def list_users(
    store: RecordStore,
    status: str | None = None,
    query: str | None = None,
) -> list[UserRecord]:
    """All members in storage order, optionally filtered by status and a name/email substring."""
    records = store.get_all()
    if status:
        wanted = LEGACY_STATUS_ALIASES.get(status, status)
        records = [r for r in records if r.status == wanted]
    if query and query.strip():
        needle = query.strip().casefold()
        records = [
            r
            for r in records
            if needle in r.full_name.casefold() or needle in r.email.casefold()
        ]
    return records


def list_pending(store: RecordStore) -> list[UserRecord]:
    return list_users(store, status="pending")


def set_user_status(
    store: RecordStore,
    record_id: str,
    new_status: str,
    settings: "Settings",
) -> tuple[UserRecord, bool]:
    """
    Move a member to new_status. Returns (record, changed).

    Raises RecordNotFound, InvalidTransition for unknown values or edges not in
    the status graph, and ProtectedRecord for the seeded administrator.
    """
    new_status = LEGACY_STATUS_ALIASES.get(new_status, new_status)
    if new_status not in STATUS_VALUES:
        raise InvalidTransition(f"Unknown status '{new_status}'.")

    record = _get_or_raise(store.get_all(), record_id)
    if record.status == new_status:
        return record, False
    if is_seeded_admin(record, settings):
        raise ProtectedRecord("The default administrator must stay active.")
    if new_status not in ALLOWED_STATUS_TRANSITIONS[record.status]:
        raise InvalidTransition(
            f"Cannot change status from '{record.status}' to '{new_status}'."
        )

    updated = store.update(record_id, status=new_status)
    logger.info(
        "Member status changed: user_id=%s from=%s to=%s",
        record_id,
        record.status,
        new_status,
    )
    return updated, True


def set_user_role(
    store: RecordStore,
    record_id: str,
    new_role: str,
    settings: "Settings",
) -> tuple[UserRecord, bool]:
    """Change a member's role. Returns (record, changed); the seeded admin keeps role admin."""
    if new_role not in ROLE_VALUES:
        raise InvalidTransition(f"Unknown role '{new_role}'.")

    record = _get_or_raise(store.get_all(), record_id)
    if record.role == new_role:
        return record, False
    if is_seeded_admin(record, settings):
        raise ProtectedRecord("The default administrator must keep the admin role.")

    updated = store.update(record_id, role=new_role)
    logger.info(
        "Member role changed: user_id=%s from=%s to=%s",
        record_id,
        record.role,
        new_role,
    )
    return updated, True


def delete_user(store: RecordStore, record_id: str, settings: "Settings") -> UserRecord:
    """Remove a member permanently and return the removed record."""
    record = _get_or_raise(store.get_all(), record_id)
    if is_seeded_admin(record, settings):
        raise ProtectedRecord("The default administrator cannot be deleted.")
    removed = store.remove(record_id)
    logger.info("Member deleted: user_id=%s", record_id)
    return removed


def member_stats(store: RecordStore, now: datetime | None = None) -> dict[str, object]:
    """
    Dashboard counts: total members (excluding rejected), members created in
    the current calendar month (UTC), and a count per status.
    """
    now = now or datetime.now(UTC)
    records = store.get_all()
    members = [r for r in records if r.status != "rejected"]
    new_this_month = 0
    for r in members:
        if r.created_at is None:
            continue
        created = r.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        created = created.astimezone(UTC)
        if (created.year, created.month) == (now.year, now.month):
            new_this_month += 1
    by_status = {status: 0 for status in sorted(STATUS_VALUES)}
    for r in records:
        by_status[r.status] += 1
    return {
        "total_members": len(members),
        "new_this_month": new_this_month,
        "by_status": by_status,
    }
