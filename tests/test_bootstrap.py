"""Unit tests for membership.services.bootstrap: idempotent seeding and drift reconciliation."""

import unittest

from pydantic import ValidationError

from membership.core.config import Settings, get_settings
from membership.core.passwords import password_policy_violation
from membership.core.security import hash_password, verify_password
from membership.schemas.user import UserRecord
from membership.services.bootstrap import ensure_admin_seed
from membership.services.record_store import MemoryStorage, RecordStore

KEY = "test_users"


class BootstrapTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = get_settings()
        self.storage = MemoryStorage()
        self.store = RecordStore(self.storage, KEY)
        self.admin_key = self.settings.ADMIN_EMAIL.casefold()
        self.initial_password = self.settings.ADMIN_INITIAL_PASSWORD.get_secret_value()

    def admins(self) -> list[UserRecord]:
        return [r for r in self.store.get_all() if r.email_key == self.admin_key]


class TestSeedCreation(BootstrapTestCase):
    def test_creates_admin_on_empty_store(self) -> None:
        self.assertEqual(ensure_admin_seed(self.store, self.settings), "created")
        (admin,) = self.admins()
        self.assertEqual(admin.role, "admin")
        self.assertEqual(admin.status, "active")
        self.assertTrue(verify_password(self.initial_password, admin.credential))

    def test_repeated_calls_keep_one_admin(self) -> None:
        outcomes = [ensure_admin_seed(self.store, self.settings) for _ in range(5)]
        self.assertEqual(outcomes, ["created"] + ["unchanged"] * 4)
        admins = self.admins()
        self.assertEqual(len(admins), 1)
        self.assertEqual(admins[0].role, "admin")
        self.assertEqual(admins[0].status, "active")

    def test_unchanged_call_does_not_write(self) -> None:
        ensure_admin_seed(self.store, self.settings)
        before = self.storage.items[KEY]
        ensure_admin_seed(self.store, self.settings)
        self.assertEqual(self.storage.items[KEY], before)

    def test_keeps_existing_members(self) -> None:
        member = UserRecord(id="m1", email="m@x.com", country_code="+62", phone_number="8100")
        self.store.save(member)
        ensure_admin_seed(self.store, self.settings)
        self.assertEqual([r.id for r in self.store.get_all()][0], "m1")
        self.assertEqual(len(self.store.get_all()), 2)


class TestSeedReconciliation(BootstrapTestCase):
    """Drift in role, status or credential is forced back on the next call."""

    def setUp(self) -> None:
        super().setUp()
        ensure_admin_seed(self.store, self.settings)
        self.admin_id = self.admins()[0].id

    def test_role_and_status_drift(self) -> None:
        self.store.update(self.admin_id, role="member", status="deactive")
        self.assertEqual(ensure_admin_seed(self.store, self.settings), "reconciled")
        admin = self.store.get(self.admin_id)
        self.assertEqual(admin.role, "admin")
        self.assertEqual(admin.status, "active")

    def test_credential_drift(self) -> None:
        self.store.update(self.admin_id, credential=hash_password("Changed1!"))
        self.assertEqual(ensure_admin_seed(self.store, self.settings), "reconciled")
        admin = self.store.get(self.admin_id)
        self.assertTrue(verify_password(self.initial_password, admin.credential))
        self.assertFalse(verify_password("Changed1!", admin.credential))

    def test_email_match_is_case_insensitive(self) -> None:
        self.store.update(self.admin_id, email=self.settings.ADMIN_EMAIL.upper())
        self.assertEqual(ensure_admin_seed(self.store, self.settings), "unchanged")
        self.assertEqual(len(self.admins()), 1)

    def test_duplicate_admins_are_collapsed(self) -> None:
        first = self.store.get(self.admin_id)
        self.store.save(first.model_copy(update={"id": "dup", "role": "member"}))
        self.assertEqual(ensure_admin_seed(self.store, self.settings), "reconciled")
        admins = self.admins()
        self.assertEqual([a.id for a in admins], [self.admin_id])


class TestAdminPasswordSetting(unittest.TestCase):
    """The seeded admin password obeys the same policy as member passwords."""

    def test_default_passes_policy(self) -> None:
        self.assertIsNone(
            password_policy_violation(Settings().ADMIN_INITIAL_PASSWORD.get_secret_value())
        )

    def test_weak_password_rejected(self) -> None:
        for password in ("Admin123", "admin123!", "Ab1!"):
            with self.subTest(password=password):
                with self.assertRaises(ValidationError):
                    Settings(ADMIN_INITIAL_PASSWORD=password)


if __name__ == "__main__":
    unittest.main()
