"""Unit tests for membership.services.record_store: whole-collection persistence and degraded reads."""

import json
import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from membership.core.errors import RecordNotFound, StorageUnavailable
from membership.models import Base
from membership.schemas.user import UserRecord
from membership.services.record_store import MemoryStorage, RecordStore, SqlStorage

KEY = "test_users"


def _record(record_id: str = "u1", email: str = "a@x.com", **kwargs: object) -> UserRecord:
    """Build a minimal UserRecord for tests."""
    defaults = {
        "full_name": "Ana",
        "country_code": "+62",
        "phone_number": "81234567",
        "credential": "hash",
        "created_at": datetime(2026, 1, 5, tzinfo=UTC),
    }
    defaults.update(kwargs)
    return UserRecord(id=record_id, email=email, **defaults)


class TestNoStorage(unittest.TestCase):
    """Without a storage backend, reads are empty and writes fail loudly."""

    def test_get_all_is_empty(self) -> None:
        store = RecordStore(None, KEY)
        self.assertEqual(store.get_all(), [])

    def test_save_raises_storage_unavailable(self) -> None:
        store = RecordStore(None, KEY)
        with self.assertRaises(StorageUnavailable):
            store.save(_record())


class TestReadDegradation(unittest.TestCase):
    """Unreadable or malformed stored data reads as an empty collection."""

    def test_missing_key(self) -> None:
        self.assertEqual(RecordStore(MemoryStorage(), KEY).get_all(), [])

    def test_invalid_json(self) -> None:
        store = RecordStore(MemoryStorage({KEY: "{not json"}), KEY)
        self.assertEqual(store.get_all(), [])

    def test_not_an_array(self) -> None:
        store = RecordStore(MemoryStorage({KEY: json.dumps({"users": []})}), KEY)
        self.assertEqual(store.get_all(), [])

    def test_backend_read_error(self) -> None:
        storage = MagicMock()
        storage.get_item.side_effect = SQLAlchemyError("connection refused")
        self.assertEqual(RecordStore(storage, KEY).get_all(), [])

    def test_invalid_entries_are_skipped(self) -> None:
        raw = json.dumps(
            [
                "garbage",
                {"id": "x", "email": "x@x.com", "status": "unknown-status"},
                {"id": "ok", "email": "ok@x.com"},
            ]
        )
        records = RecordStore(MemoryStorage({KEY: raw}), KEY).get_all()
        self.assertEqual([r.id for r in records], ["ok"])


class TestLegacyEntries(unittest.TestCase):
    """Entries written by older clients: no id, 'approved' status, missing optional fields."""

    def test_legacy_entry_is_readable(self) -> None:
        raw = json.dumps(
            [
                {
                    "fullName": "Old Member",
                    "email": "old@x.com",
                    "countryCode": "+62",
                    "phoneNumber": "8111111111",
                    "role": "user",
                    "status": "approved",
                }
            ]
        )
        store = RecordStore(MemoryStorage({KEY: raw}), KEY)
        (record,) = store.get_all()
        self.assertEqual(record.status, "active")
        self.assertEqual(record.full_name, "Old Member")
        self.assertIsNone(record.created_at)
        self.assertTrue(record.id)

    def test_legacy_id_is_stable_across_reads(self) -> None:
        raw = json.dumps([{"email": "old@x.com"}])
        store = RecordStore(MemoryStorage({KEY: raw}), KEY)
        self.assertEqual(store.get_all()[0].id, store.get_all()[0].id)


class TestWrites(unittest.TestCase):
    """save/update/remove rewrite the whole collection under one key."""

    def setUp(self) -> None:
        self.storage = MemoryStorage()
        self.store = RecordStore(self.storage, KEY)

    def test_save_appends_in_order_with_camel_case_fields(self) -> None:
        self.store.save(_record("u1", "a@x.com"))
        self.store.save(_record("u2", "b@x.com"))
        data = json.loads(self.storage.items[KEY])
        self.assertEqual([d["id"] for d in data], ["u1", "u2"])
        self.assertIn("fullName", data[0])
        self.assertIn("countryCode", data[0])
        self.assertIn("createdAt", data[0])
        self.assertNotIn("full_name", data[0])

    def test_update_changes_one_record(self) -> None:
        self.store.save(_record("u1", "a@x.com"))
        self.store.save(_record("u2", "b@x.com"))
        updated = self.store.update("u2", status="active")
        self.assertEqual(updated.status, "active")
        statuses = {r.id: r.status for r in self.store.get_all()}
        self.assertEqual(statuses, {"u1": "pending", "u2": "active"})

    def test_update_unknown_id(self) -> None:
        with self.assertRaises(RecordNotFound):
            self.store.update("missing", status="active")

    def test_remove(self) -> None:
        self.store.save(_record("u1", "a@x.com"))
        self.store.save(_record("u2", "b@x.com"))
        removed = self.store.remove("u1")
        self.assertEqual(removed.id, "u1")
        self.assertEqual([r.id for r in self.store.get_all()], ["u2"])

    def test_remove_unknown_id(self) -> None:
        with self.assertRaises(RecordNotFound):
            self.store.remove("missing")

    def test_backend_write_error_raises(self) -> None:
        storage = MagicMock()
        storage.get_item.return_value = None
        storage.set_item.side_effect = SQLAlchemyError("disk full")
        with self.assertRaises(StorageUnavailable) as ctx:
            RecordStore(storage, KEY).save(_record())
        self.assertIsInstance(ctx.exception.cause, SQLAlchemyError)


class TestSqlStorage(unittest.TestCase):
    """SqlStorage keeps one row per key in storage_entries."""

    def setUp(self) -> None:
        self.engine = create_engine("sqlite://")
        Base.metadata.create_all(self.engine)
        self.session = Session(self.engine)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()

    def test_round_trip_and_overwrite(self) -> None:
        store = RecordStore(SqlStorage(self.session), KEY)
        self.assertEqual(store.get_all(), [])
        store.save(_record("u1", "a@x.com"))
        store.save(_record("u2", "b@x.com"))

        fresh = RecordStore(SqlStorage(self.session), KEY)
        self.assertEqual([r.id for r in fresh.get_all()], ["u1", "u2"])
        self.assertEqual(SqlStorage(self.session).get_item("other-key"), None)


if __name__ == "__main__":
    unittest.main()
