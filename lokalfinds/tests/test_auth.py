import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

from workos.exceptions import BadRequestException, NotFoundException

from lokalfinds.api.v1.schemas.auth import UserProfileUpdate
from lokalfinds.core.exceptions import AuthErrorCategory, AuthProviderError, ErrorKind, ValidationError
from lokalfinds.core.local_storage import LocalKeyValueStore
from lokalfinds.services.auth import (
    PENDING_SIGNUP_KEY,
    AuthFacade,
    WorkOSAuthProvider,
    translate_workos_error,
)
from lokalfinds.services.session import SessionStatus, SessionStore
from lokalfinds.tests.helpers import FakeAuthProvider


class LocalStorageTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.storage = LocalKeyValueStore(Path(self.tmp.name) / "nested" / "storage.json")

    async def asyncTearDown(self):
        self.tmp.cleanup()

    async def test_set_get_remove(self):
        self.assertIsNone(await self.storage.get_item("k"))
        await self.storage.set_item("k", "v")
        self.assertEqual(await self.storage.get_item("k"), "v")
        self.assertTrue(await self.storage.remove_item("k"))
        self.assertFalse(await self.storage.remove_item("k"))

    async def test_pop_is_single_use(self):
        await self.storage.set_item("k", "v")
        self.assertEqual(await self.storage.pop_item("k"), "v")
        self.assertIsNone(await self.storage.pop_item("k"))

    async def test_corrupt_file_reads_as_empty(self):
        self.storage.path.parent.mkdir(parents=True)
        self.storage.path.write_text("{not json", encoding="utf-8")
        self.assertIsNone(await self.storage.get_item("k"))


class AuthFacadeTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.provider = FakeAuthProvider()
        self.store = SessionStore()
        self.storage = LocalKeyValueStore(Path(self.tmp.name) / "storage.json")
        self.auth = AuthFacade(self.provider, self.store, self.storage)
        self.seen = []
        self.store.subscribe(lambda session: self.seen.append(session.status))

    async def asyncTearDown(self):
        self.tmp.cleanup()

    async def test_login_transitions_through_signing_in(self):
        session = await self.auth.login(" ana@example.com ", "secret1")

        self.assertEqual(session.status, SessionStatus.SIGNED_IN)
        self.assertEqual(session.user.id, "user_1")
        self.assertEqual(session.display_name, "Ana Cruz")
        self.assertEqual(self.seen, [SessionStatus.SIGNING_IN, SessionStatus.SIGNED_IN])
        self.assertEqual(self.provider.calls, [("sign_in", ("ana@example.com", "secret1"))])

    async def test_login_failure_returns_to_signed_out(self):
        self.provider.error = AuthProviderError(AuthErrorCategory.UNKNOWN_ACCOUNT)

        with self.assertRaises(AuthProviderError) as ctx:
            await self.auth.login("ana@example.com", "secret1")

        self.assertEqual(ctx.exception.message, "No account found with this email address")
        self.assertEqual(ctx.exception.kind, ErrorKind.AUTH_PROVIDER)
        self.assertEqual(self.store.snapshot.status, SessionStatus.SIGNED_OUT)
        self.assertEqual(len(self.provider.calls), 1)

    async def test_failed_login_keeps_guest_session(self):
        guest = await self.auth.login_anonymously()
        self.provider.error = AuthProviderError(AuthErrorCategory.GENERIC, "Invalid email or password")

        with self.assertRaises(AuthProviderError):
            await self.auth.login("ana@example.com", "secret1")

        self.assertEqual(self.store.snapshot.status, SessionStatus.GUEST)
        self.assertEqual(self.store.snapshot.user, guest.user)
        self.assertEqual(
            self.seen, [SessionStatus.GUEST, SessionStatus.SIGNING_IN, SessionStatus.GUEST]
        )

    async def test_login_validates_before_provider(self):
        with self.assertRaises(ValidationError):
            await self.auth.login("not-an-email", "secret1")
        self.assertEqual(self.provider.calls, [])
        self.assertEqual(self.seen, [])

    async def test_signup_short_password_makes_no_provider_call(self):
        with self.assertRaises(ValidationError) as ctx:
            await self.auth.signup("ana@example.com", "abc", "Ana", "Cruz")
        self.assertEqual(ctx.exception.field, "password")
        self.assertEqual(self.provider.calls, [])

    async def test_signup(self):
        session = await self.auth.signup(
            "ana@example.com", "secret1", "Ana", "Cruz", confirm_password="secret1"
        )
        self.assertEqual(session.status, SessionStatus.SIGNED_IN)
        self.assertEqual(self.seen, [SessionStatus.SIGNING_UP, SessionStatus.SIGNED_IN])
        self.assertEqual(self.provider.calls[0][0], "sign_up")

    async def test_guest_cannot_update_profile(self):
        await self.auth.login_anonymously()
        self.provider.calls.clear()

        with self.assertRaises(ValidationError) as ctx:
            await self.auth.update_user_profile(UserProfileUpdate(first_name="Ana", last_name="Cruz"))

        self.assertEqual(ctx.exception.message, "Please create an account to update your profile")
        self.assertEqual(self.provider.calls, [])

    async def test_update_profile(self):
        await self.auth.login("ana@example.com", "secret1")
        session = await self.auth.update_user_profile(
            UserProfileUpdate(first_name="Ana Maria", last_name="Cruz")
        )
        self.assertEqual(session.profile.display_name, "Ana Maria Cruz")
        # Email falls back to the signed-in identity
        self.assertEqual(session.profile.email, "ana@example.com")

    async def test_update_profile_rejects_bad_names(self):
        await self.auth.login("ana@example.com", "secret1")
        self.provider.calls.clear()
        with self.assertRaises(ValidationError):
            await self.auth.update_user_profile(UserProfileUpdate(first_name="", last_name="Cruz"))
        self.assertEqual(self.provider.calls, [])

    async def test_reset_password(self):
        await self.auth.reset_password("ana@example.com")
        self.assertEqual(self.provider.calls, [("send_password_reset", ("ana@example.com",))])
        with self.assertRaises(ValidationError):
            await self.auth.reset_password("")

    async def test_guest_to_signup_sets_flag_once(self):
        session = await self.auth.login_anonymously()
        self.assertTrue(session.is_guest)
        self.assertTrue(session.user.is_anonymous)

        self.assertTrue(await self.auth.logout_guest_and_signup())
        self.assertEqual(self.store.snapshot.status, SessionStatus.SIGNED_OUT)
        self.assertEqual(await self.storage.get_item(PENDING_SIGNUP_KEY), "true")

        self.assertTrue(await self.auth.consume_pending_signup())
        self.assertFalse(await self.auth.consume_pending_signup())

    async def test_flag_write_failure_keeps_guest_session(self):
        await self.auth.login_anonymously()
        with patch.object(self.storage, "set_item", side_effect=OSError("read-only")):
            self.assertFalse(await self.auth.logout_guest_and_signup())
        self.assertTrue(self.store.snapshot.is_guest)

    async def test_only_guests_switch_to_signup(self):
        await self.auth.login("ana@example.com", "secret1")
        with self.assertRaises(ValidationError):
            await self.auth.logout_guest_and_signup()

    async def test_logout(self):
        await self.auth.login("ana@example.com", "secret1")
        session = await self.auth.logout()
        self.assertEqual(session.status, SessionStatus.SIGNED_OUT)
        self.assertIsNone(session.user)

    async def test_unsubscribe(self):
        seen = []
        unsubscribe = self.store.subscribe(seen.append)
        await self.auth.login_anonymously()
        unsubscribe()
        await self.auth.logout()
        self.assertEqual([s.status for s in seen], [SessionStatus.GUEST])


def workos_error(cls, code=None, errors=None, status_code=400):
    exc = Mock(spec=cls)
    exc.code = code
    exc.errors = errors
    exc.response = Mock(status_code=status_code)
    return exc


class WorkOSErrorTranslationTests(unittest.TestCase):
    def test_not_found_is_unknown_account(self):
        error = translate_workos_error(workos_error(NotFoundException, status_code=404))
        self.assertEqual(error.category, AuthErrorCategory.UNKNOWN_ACCOUNT)

    def test_invalid_email(self):
        error = translate_workos_error(
            workos_error(BadRequestException, errors=[{"code": "invalid_email"}])
        )
        self.assertEqual(error.category, AuthErrorCategory.INVALID_EMAIL)
        self.assertEqual(error.message, "Please enter a valid email address")

    def test_rate_limited(self):
        error = translate_workos_error(workos_error(Exception, status_code=429))
        self.assertEqual(error.category, AuthErrorCategory.RATE_LIMITED)

    def test_anything_else_is_generic(self):
        error = translate_workos_error(RuntimeError("boom"))
        self.assertEqual(error.category, AuthErrorCategory.GENERIC)
        self.assertEqual(error.message, "Something went wrong. Please try again.")


class WorkOSAuthProviderTests(unittest.IsolatedAsyncioTestCase):
    def _workos_user(self, **overrides):
        values = dict(id="user_01", email="ana@example.com", first_name="Ana", last_name="Cruz")
        values.update(overrides)
        return Mock(**values)

    async def test_sign_in(self):
        client = MagicMock()
        client.user_management.authenticate_with_password.return_value = Mock(
            user=self._workos_user(), access_token="at", refresh_token="rt"
        )
        provider = WorkOSAuthProvider(workos_client=client)

        result = await provider.sign_in("ana@example.com", "secret1")

        client.user_management.authenticate_with_password.assert_called_once_with(
            email="ana@example.com", password="secret1"
        )
        self.assertEqual(result.user.id, "user_01")
        self.assertEqual(result.user.access_token, "at")
        self.assertEqual(result.profile.display_name, "Ana Cruz")

    async def test_sign_up_creates_then_signs_in(self):
        client = MagicMock()
        client.user_management.create_user.return_value = self._workos_user()
        client.user_management.authenticate_with_password.return_value = Mock(
            user=self._workos_user(), access_token="at", refresh_token="rt"
        )
        provider = WorkOSAuthProvider(workos_client=client)

        await provider.sign_up("ana@example.com", "secret1", "Ana", "Cruz")

        client.user_management.create_user.assert_called_once_with(
            email="ana@example.com", password="secret1", first_name="Ana", last_name="Cruz"
        )
        client.user_management.authenticate_with_password.assert_called_once()

    async def test_provider_errors_are_translated(self):
        client = MagicMock()
        client.user_management.create_password_reset.side_effect = RuntimeError("network down")
        provider = WorkOSAuthProvider(workos_client=client)

        with self.assertRaises(AuthProviderError) as ctx:
            await provider.send_password_reset("ana@example.com")
        self.assertIsInstance(ctx.exception.cause, RuntimeError)

    async def test_guests_never_reach_workos(self):
        client = MagicMock()
        provider = WorkOSAuthProvider(workos_client=client)

        guest = await provider.sign_in_anonymously()

        self.assertTrue(guest.is_anonymous)
        self.assertTrue(guest.id.startswith("guest_"))
        self.assertEqual(client.mock_calls, [])


if __name__ == "__main__":
    unittest.main()
