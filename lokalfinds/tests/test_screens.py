import asyncio
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from lokalfinds.api.v1.schemas.auth import AuthUser, UserProfile
from lokalfinds.api.v1.schemas.product import ProductCreate
from lokalfinds.api.v1.schemas.store import BusinessProfileCreate
from lokalfinds.core.exceptions import ErrorKind, FetchError
from lokalfinds.core.local_storage import LocalKeyValueStore
from lokalfinds.screens.account import LoginScreen, SettingsScreen
from lokalfinds.screens.base import Err, Ok, Screen
from lokalfinds.screens.stores import (
    MyStoreScreen,
    ReviewFormScreen,
    StoreDetailsScreen,
    StoreReviewsScreen,
)
from lokalfinds.services.auth import AuthFacade
from lokalfinds.services.gateway import DataGateway
from lokalfinds.services.session import Session, SessionStatus, SessionStore
from lokalfinds.tests.helpers import (
    FakeAuthProvider,
    add_rows,
    create_test_session_maker,
    make_product,
    make_profile,
    make_review,
)



def signed_in_store(user_id="owner-1"):
    return SessionStore(
        Session(
            status=SessionStatus.SIGNED_IN,
            user=AuthUser(id=user_id, email=f"{user_id}@example.com"),
            profile=UserProfile(first_name="Ana", last_name="Cruz", email=f"{user_id}@example.com"),
        )
    )


def guest_store():
    return SessionStore(
        Session(status=SessionStatus.GUEST, user=AuthUser(id="guest_1", is_anonymous=True))
    )


class ControlledScreen(Screen[str]):
    """Screen whose fetch resolves when the test says so."""

    def __init__(self):
        super().__init__()
        self.pending = []

    async def _fetch(self) -> str:
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


class ScreenBaseTests(unittest.IsolatedAsyncioTestCase):
    async def test_load_sets_data(self):
        screen = ControlledScreen()
        task = asyncio.create_task(screen.load())
        await asyncio.sleep(0)
        self.assertTrue(screen.state.loading)

        screen.pending[0].set_result("hello")
        result = await task

        self.assertIsInstance(result, Ok)
        self.assertEqual(screen.state.data, "hello")
        self.assertFalse(screen.state.loading)

    async def test_late_result_after_unmount_is_discarded(self):
        screen = ControlledScreen()
        task = asyncio.create_task(screen.load())
        await asyncio.sleep(0)

        screen.unmount()
        screen.pending[0].set_result("late")
        result = await task

        self.assertEqual(result.value, "late")
        self.assertIsNone(screen.state.data)
        self.assertTrue(screen.state.loading)

    async def test_failed_refresh_keeps_prior_data(self):
        screen = ControlledScreen()
        first = asyncio.create_task(screen.load())
        await asyncio.sleep(0)
        screen.pending[0].set_result("v1")
        await first

        refresh = asyncio.create_task(screen.refresh())
        await asyncio.sleep(0)
        self.assertTrue(screen.state.refreshing)
        screen.pending[1].set_exception(FetchError("Failed to fetch reviews"))
        result = await refresh

        self.assertIsInstance(result, Err)
        self.assertEqual(result.kind, ErrorKind.FETCH)
        self.assertEqual(screen.state.data, "v1")
        self.assertTrue(screen.state.can_retry)
        self.assertFalse(screen.state.refreshing)

    async def test_concurrent_refreshes_last_to_resolve_wins(self):
        screen = ControlledScreen()
        a = asyncio.create_task(screen.refresh())
        b = asyncio.create_task(screen.refresh())
        await asyncio.sleep(0)

        screen.pending[1].set_result("b")
        await b
        screen.pending[0].set_result("a")
        await a

        self.assertEqual(screen.state.data, "a")

    async def test_unexpected_errors_propagate(self):
        class Broken(Screen[str]):
            async def _fetch(self):
                raise KeyError("bug")

        screen = Broken()
        with self.assertRaises(KeyError):
            await screen.load()
        self.assertFalse(screen.state.loading)

        with self.assertRaises(KeyError):
            await screen.refresh()
        self.assertFalse(screen.state.refreshing)

    async def test_retry_after_failed_load(self):
        screen = ControlledScreen()
        first = asyncio.create_task(screen.load())
        await asyncio.sleep(0)
        screen.pending[0].set_exception(FetchError("Failed to fetch products"))
        await first
        self.assertTrue(screen.state.can_retry)

        retry = asyncio.create_task(screen.retry())
        await asyncio.sleep(0)
        self.assertTrue(screen.state.loading)
        self.assertIsNone(screen.state.error)
        screen.pending[1].set_result("products")
        result = await retry

        self.assertIsInstance(result, Ok)
        self.assertEqual(screen.state.data, "products")
        self.assertFalse(screen.state.can_retry)
        self.assertFalse(screen.state.loading)


class StoreScreenTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.engine, self.session_maker = await create_test_session_maker()
        self.gateway = DataGateway(self.session_maker)

    async def asyncTearDown(self):
        await self.engine.dispose()

    async def test_my_store_fetches_profile_then_products(self):
        (profile,) = await add_rows(self.session_maker, make_profile("owner-1"))
        await add_rows(self.session_maker, make_product(profile.id, "Bread"))

        screen = MyStoreScreen(self.gateway, signed_in_store("owner-1"))
        result = await screen.load()

        self.assertTrue(result.ok)
        self.assertEqual(screen.state.data.profile.id, profile.id)
        self.assertEqual([p.name for p in screen.state.data.products], ["Bread"])

    async def test_my_store_skips_products_without_profile(self):
        gateway = MagicMock()
        gateway.fetch_business_profile_by_owner = AsyncMock(return_value=None)
        gateway.fetch_products_by_store = AsyncMock()

        screen = MyStoreScreen(gateway, signed_in_store())
        await screen.load()

        self.assertIsNone(screen.state.data.profile)
        gateway.fetch_products_by_store.assert_not_called()

    async def test_my_store_create_and_add_product(self):
        screen = MyStoreScreen(self.gateway, signed_in_store("owner-7"))
        await screen.load()

        created = await screen.create_store(BusinessProfileCreate(name="Shop", address="A", hours="H"))
        self.assertTrue(created.ok)
        added = await screen.add_product(ProductCreate(name="Soap", price="1.25"))
        self.assertTrue(added.ok)

        self.assertEqual([p.name for p in screen.state.data.products], ["Soap"])
        deleted = await screen.delete_product(added.value.id)
        self.assertTrue(deleted.ok)
        self.assertEqual(screen.state.data.products, [])

    async def test_out_of_range_price_is_a_validation_error(self):
        screen = MyStoreScreen(self.gateway, signed_in_store("owner-8"))
        await screen.load()
        await screen.create_store(BusinessProfileCreate(name="Shop", address="A", hours="H"))

        result = await screen.add_product(ProductCreate(name="Bread", price="1e30"))

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertFalse(screen.state.loading)
        self.assertEqual(screen.state.data.products, [])

    async def test_guest_cannot_manage_store(self):
        gateway = MagicMock()
        gateway.create_business_profile = AsyncMock()
        screen = MyStoreScreen(gateway, guest_store())

        result = await screen.create_store(BusinessProfileCreate(name="Shop", address="A", hours="H"))

        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertFalse(screen.state.can_retry)
        gateway.create_business_profile.assert_not_called()

    async def test_store_details(self):
        (profile,) = await add_rows(self.session_maker, make_profile("owner-1"))
        await add_rows(
            self.session_maker,
            *[make_review(profile.id, f"u{i}", rating, minutes=i) for i, rating in enumerate([4, 5, 3, 4])],
            make_product(profile.id, "Bread"),
        )

        screen = StoreDetailsScreen(self.gateway, signed_in_store("u0"), profile.id)
        await screen.load()
        data = screen.state.data

        self.assertEqual([r.user_id for r in data.recent_reviews], ["u3", "u2", "u1"])
        self.assertEqual(data.summary.count, 4)
        self.assertEqual(data.summary.average_rating, 4.0)
        self.assertTrue(data.user_has_reviewed)
        self.assertEqual([t.key for t in data.tabs], ["details", "products", "services"])
        self.assertEqual([p.name for p in data.products], ["Bread"])

    async def test_store_details_fetch_error_is_retryable(self):
        gateway = MagicMock()
        gateway.fetch_business_profile = AsyncMock(side_effect=FetchError("Failed to fetch business profile 1"))

        screen = StoreDetailsScreen(gateway, signed_in_store(), 1)
        result = await screen.load()

        self.assertFalse(result.ok)
        self.assertTrue(screen.state.can_retry)
        self.assertIsNone(screen.state.data)

    async def test_store_reviews(self):
        (profile,) = await add_rows(self.session_maker, make_profile())
        screen = StoreReviewsScreen(self.gateway, profile.id)
        await screen.load()
        self.assertEqual(screen.state.data.summary.average_rating, 0.0)
        self.assertEqual(screen.state.data.reviews, [])

    async def test_review_form_guest_barred(self):
        gateway = MagicMock()
        gateway.submit_review = AsyncMock()
        screen = ReviewFormScreen(gateway, guest_store(), 1)

        await screen.load()
        result = await screen.submit(5, "Nice")

        self.assertEqual(result.message, "Please create an account to write a review")
        gateway.submit_review.assert_not_called()

    async def test_review_form_write_then_edit(self):
        (profile,) = await add_rows(self.session_maker, make_profile())
        screen = ReviewFormScreen(self.gateway, signed_in_store("u1"), profile.id)
        await screen.load()
        self.assertFalse(screen.is_edit)

        await screen.submit(3, "ok")
        self.assertTrue(screen.is_edit)
        self.assertEqual(screen.state.data.user_name, "Ana Cruz")

        await screen.submit(5, "better")
        reviews = await self.gateway.fetch_reviews_by_store(profile.id)
        self.assertEqual([(r.user_id, r.rating) for r in reviews], [("u1", 5)])


class AccountScreenTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.provider = FakeAuthProvider()
        self.auth = AuthFacade(
            self.provider, SessionStore(), LocalKeyValueStore(Path(self.tmp.name) / "s.json")
        )

    async def asyncTearDown(self):
        self.tmp.cleanup()

    async def test_login_screen_consumes_pending_signup(self):
        await self.auth.login_anonymously()
        settings_screen = SettingsScreen(self.auth)
        await settings_screen.create_account()

        first = LoginScreen(self.auth)
        await first.load()
        self.assertTrue(first.state.data)

        second = LoginScreen(self.auth)
        await second.load()
        self.assertFalse(second.state.data)

    async def test_settings_guest_cannot_save(self):
        await self.auth.login_anonymously()
        self.provider.calls.clear()
        screen = SettingsScreen(self.auth)
        await screen.load()

        result = await screen.save("Ana", "Cruz")

        self.assertTrue(screen.is_guest)
        self.assertEqual(result.kind, ErrorKind.VALIDATION)
        self.assertEqual(self.provider.calls, [])

    async def test_login_screen_submit_error(self):
        screen = LoginScreen(self.auth)
        result = await screen.submit("", "")
        self.assertEqual(result.message, "Please fill in all fields")
        self.assertFalse(screen.state.loading)


if __name__ == "__main__":
    unittest.main()
