"""
Record store: the whole member collection persisted as one JSON array under one key.

Every mutation rewrites the full collection in a single write. There is no
per-record locking; two concurrent writers can overwrite each other's changes
(last write wins on the whole collection).
"""

import json
import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from membership.core.errors import RecordNotFound, StorageUnavailable
from membership.models import StorageEntry
from membership.schemas.user import UserRecord

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Minimal key/value storage with local-storage semantics."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-process dict storage, used by tests and scripts."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class SqlStorage:
    """Storage backed by the storage_entries table; each set_item commits."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_item(self, key: str) -> str | None:
        entry = self.session.get(StorageEntry, key)
        return entry.value if entry is not None else None

    def set_item(self, key: str, value: str) -> None:
        entry = self.session.get(StorageEntry, key)
        if entry is None:
            self.session.add(StorageEntry(key=key, value=value))
        else:
            entry.value = value
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise


class RecordStore:
    """
    Read/write access to the member collection.

    storage=None means there is no persistence context at all: reads return an
    empty collection and writes raise StorageUnavailable.
    """

    def __init__(self, storage: Storage | None, key: str) -> None:
        self.storage = storage
        self.key = key

    def get_all(self) -> list[UserRecord]:
        """All records in storage order; empty if nothing is stored or storage is unreachable."""
        if self.storage is None:
            return []
        try:
            raw = self.storage.get_item(self.key)
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Member storage read failed; treating as empty: %s", e)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Member storage key %s holds invalid JSON; treating as empty: %s", self.key, e)
            return []
        if not isinstance(data, list):
            logger.warning("Member storage key %s is not a JSON array; treating as empty", self.key)
            return []
        return list(_parse_entries(data))

    def replace_all(self, records: Iterable[UserRecord]) -> None:
        """Persist a full replacement collection in one write."""
        if self.storage is None:
            raise StorageUnavailable("Member storage is not available; nothing was saved.")
        payload = json.dumps(
            [r.to_storage() for r in records],
            ensure_ascii=False,
            separators=(",", ":"),
        )
        try:
            self.storage.set_item(self.key, payload)
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailable("Failed to save member records.", cause=e) from e

    def save(self, record: UserRecord) -> UserRecord:
        """Append one record and persist the whole collection."""
        records = self.get_all()
        records.append(record)
        self.replace_all(records)
        return record

    def find(self, predicate: Callable[[UserRecord], bool]) -> UserRecord | None:
        """First record matching predicate, in storage order."""
        return next((r for r in self.get_all() if predicate(r)), None)

    def get(self, record_id: str) -> UserRecord:
        record = self.find(lambda r: r.id == record_id)
        if record is None:
            raise RecordNotFound(f"Member '{record_id}' not found.")
        return record

    def update(self, record_id: str, **changes: Any) -> UserRecord:
        """Apply field changes to one record and persist the whole collection."""
        records = self.get_all()
        for i, record in enumerate(records):
            if record.id == record_id:
                updated = record.model_copy(update=changes)
                records[i] = updated
                self.replace_all(records)
                return updated
        raise RecordNotFound(f"Member '{record_id}' not found.")

    def remove(self, record_id: str) -> UserRecord:
        """Drop one record and persist the remainder."""
        records = self.get_all()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            raise RecordNotFound(f"Member '{record_id}' not found.")
        removed = next(r for r in records if r.id == record_id)
        self.replace_all(remaining)
        return removed


def _parse_entries(data: list[Any]) -> Iterable[UserRecord]:
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning("Skipping stored member entry %s: not an object", index)
            continue
        try:
            yield UserRecord.model_validate(entry)
        except ValidationError as e:
            logger.warning(
                "Skipping stored member entry %s: %s",
                index,
                e.errors(include_url=False),
            )
