"""Unit tests for membership.services.identity: identifier matching and status-gated sign-in."""

import unittest

from membership.core.config import get_settings
from membership.core.errors import (
    AccountDeactivated,
    AccountNotActive,
    AccountPending,
    AccountRejected,
)
from membership.core.security import decode_access_token
from membership.schemas.user import RegistrationCandidate
from membership.services.identity import authenticate, resolve_identity, sign_in
from membership.services.lifecycle import set_user_status
from membership.services.record_store import MemoryStorage, RecordStore
from membership.services.registration import register_user

KEY = "test_users"
PASSWORD = "Abc12345!"


class IdentityTestCase(unittest.TestCase):
    """Store with one registered member: a@x.com / +1 5551234."""

    def setUp(self) -> None:
        self.store = RecordStore(MemoryStorage(), KEY)
        self.record = register_user(
            self.store,
            RegistrationCandidate(
                full_name="Ana",
                email="a@x.com",
                country_code="+1",
                phone_number="5551234",
                password=PASSWORD,
            ),
            get_settings(),
        )

    def set_status(self, status: str) -> None:
        self.store.update(self.record.id, status=status)


class TestAuthenticate(IdentityTestCase):
    def test_email_and_phone_resolve_to_same_record(self) -> None:
        by_email = authenticate(self.store, "a@x.com", PASSWORD)
        by_phone = authenticate(self.store, "+15551234", PASSWORD)
        self.assertIsNotNone(by_email)
        self.assertIsNotNone(by_phone)
        self.assertEqual(by_email.id, self.record.id)
        self.assertEqual(by_phone.id, self.record.id)

    def test_email_is_trimmed_and_case_insensitive(self) -> None:
        record = authenticate(self.store, "  A@X.Com ", PASSWORD)
        self.assertIsNotNone(record)

    def test_phone_identifier_whitespace_is_ignored(self) -> None:
        self.assertIsNotNone(authenticate(self.store, "+1 555 1234", PASSWORD))

    def test_wrong_password(self) -> None:
        self.assertIsNone(authenticate(self.store, "a@x.com", "Abc12345?"))

    def test_password_is_case_sensitive(self) -> None:
        self.assertIsNone(authenticate(self.store, "a@x.com", PASSWORD.lower()))

    def test_unknown_identifier(self) -> None:
        self.assertIsNone(authenticate(self.store, "nobody@x.com", PASSWORD))

    def test_empty_inputs(self) -> None:
        self.assertIsNone(authenticate(self.store, "", PASSWORD))
        self.assertIsNone(authenticate(self.store, "a@x.com", ""))

    def test_phone_number_without_country_code_does_not_match(self) -> None:
        self.assertIsNone(authenticate(self.store, "5551234", PASSWORD))


class TestResolveIdentity(IdentityTestCase):
    def test_resolves_without_credential(self) -> None:
        self.assertEqual(resolve_identity(self.store, "a@x.com").id, self.record.id)
        self.assertEqual(resolve_identity(self.store, "+1 5551234").id, self.record.id)

    def test_unknown(self) -> None:
        self.assertIsNone(resolve_identity(self.store, "+19999999"))
        self.assertIsNone(resolve_identity(self.store, "   "))


class TestSignIn(IdentityTestCase):
    """Only active members get a session, even with the correct password."""

    def test_pending_is_blocked(self) -> None:
        with self.assertRaises(AccountPending) as ctx:
            sign_in(self.store, "a@x.com", PASSWORD)
        self.assertEqual(ctx.exception.status, "pending")

    def test_rejected_is_blocked(self) -> None:
        self.set_status("rejected")
        with self.assertRaises(AccountRejected):
            sign_in(self.store, "+15551234", PASSWORD)

    def test_deactive_is_blocked(self) -> None:
        self.set_status("deactive")
        with self.assertRaises(AccountDeactivated):
            sign_in(self.store, "a@x.com", PASSWORD)

    def test_blocked_errors_share_base_class(self) -> None:
        for status in ("pending", "rejected", "deactive"):
            with self.subTest(status=status):
                self.set_status(status)
                with self.assertRaises(AccountNotActive):
                    sign_in(self.store, "a@x.com", PASSWORD)

    def test_active_gets_token(self) -> None:
        self.set_status("active")
        result = sign_in(self.store, "a@x.com", PASSWORD)
        self.assertIsNotNone(result)
        record, token = result
        self.assertEqual(record.status, "active")
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], self.record.id)
        self.assertEqual(payload["role"], "member")

    def test_wrong_password_returns_none_regardless_of_status(self) -> None:
        self.assertIsNone(sign_in(self.store, "a@x.com", "Wrong123!"))


class TestRejectedReRegistration(IdentityTestCase):
    """A rejected applicant registers again with the same email, phone and password."""

    def setUp(self) -> None:
        super().setUp()
        self.set_status("rejected")
        self.renewed = register_user(
            self.store,
            RegistrationCandidate(
                full_name="Ana",
                email="a@x.com",
                country_code="+1",
                phone_number="5551234",
                password=PASSWORD,
            ),
            get_settings(),
        )

    def test_resolves_to_new_record(self) -> None:
        self.assertNotEqual(self.renewed.id, self.record.id)
        self.assertEqual(resolve_identity(self.store, "a@x.com").id, self.renewed.id)
        self.assertEqual(resolve_identity(self.store, "+1 5551234").id, self.renewed.id)

    def test_new_record_pending_until_approved(self) -> None:
        with self.assertRaises(AccountPending):
            sign_in(self.store, "a@x.com", PASSWORD)

    def test_approved_new_record_signs_in(self) -> None:
        set_user_status(self.store, self.renewed.id, "active", get_settings())
        for identifier in ("a@x.com", "+15551234"):
            with self.subTest(identifier=identifier):
                record, token = sign_in(self.store, identifier, PASSWORD)
                self.assertEqual(record.id, self.renewed.id)
                self.assertEqual(decode_access_token(token)["sub"], self.renewed.id)

    def test_rejected_only_when_no_other_match(self) -> None:
        self.store.remove(self.renewed.id)
        with self.assertRaises(AccountRejected):
            sign_in(self.store, "a@x.com", PASSWORD)


if __name__ == "__main__":
    unittest.main()
