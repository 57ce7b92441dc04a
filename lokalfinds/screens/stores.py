"""
Store screens: the owner's own store, public store pages and reviews.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from lokalfinds.api.v1.schemas.classifier import ProfileTab
from lokalfinds.api.v1.schemas.product import ProductCreate, ProductUpdate, ProductView
from lokalfinds.api.v1.schemas.review import ReviewSummary, ReviewView
from lokalfinds.api.v1.schemas.store import BusinessProfileCreate, BusinessProfileView
from lokalfinds.core.config import settings
from lokalfinds.core.exceptions import FetchError, ValidationError
from lokalfinds.screens.base import Result, Screen
from lokalfinds.services.classifiers import get_tabs_for_profile
from lokalfinds.services.gateway import DataGateway
from lokalfinds.services.review import summarize_reviews, user_has_reviewed
from lokalfinds.services.session import SessionStore, require_member

GUEST_STORE_MESSAGE = "Please create an account to manage a store"
GUEST_REVIEW_MESSAGE = "Please create an account to write a review"


@dataclass(frozen=True)
class MyStoreData:
    profile: Optional[BusinessProfileView] = None
    products: List[ProductView] = field(default_factory=list)


@dataclass(frozen=True)
class StoreDetailsData:
    store: BusinessProfileView
    recent_reviews: List[ReviewView]
    summary: ReviewSummary
    user_has_reviewed: bool
    tabs: List[ProfileTab]
    products: List[ProductView] = field(default_factory=list)


@dataclass(frozen=True)
class StoreReviewsData:
    summary: ReviewSummary
    reviews: List[ReviewView]


class MyStoreScreen(Screen[MyStoreData]):
    """
    The signed-in owner's store and its products.

    Products are fetched only after the profile resolves, since the query
    needs the store id.
    """

    def __init__(self, gateway: DataGateway, session_store: SessionStore):
        super().__init__()
        self.gateway = gateway
        self.session_store = session_store

    def _owner_id(self) -> str:
        session = self.session_store.snapshot
        require_member(session, GUEST_STORE_MESSAGE)
        return session.user_id

    def _store_id(self) -> int:
        profile = self.state.data.profile if self.state.data else None
        if profile is None:
            raise ValidationError("Create your store before adding products", field="store")
        return profile.id

    async def _fetch(self) -> MyStoreData:
        profile = await self.gateway.fetch_business_profile_by_owner(self._owner_id())
        if profile is None:
            return MyStoreData()
        products = await self.gateway.fetch_products_by_store(profile.id)
        return MyStoreData(profile=profile, products=products)

    async def create_store(self, data: BusinessProfileCreate) -> Result:
        async def create() -> BusinessProfileView:
            return await self.gateway.create_business_profile(self._owner_id(), data)

        result = await self._submit(create())
        if result.ok:
            self._update(data=MyStoreData(profile=result.value))
        return result

    async def add_product(self, data: ProductCreate) -> Result:
        async def add() -> ProductView:
            self._owner_id()
            return await self.gateway.add_product(self._store_id(), data)

        result = await self._submit(add())
        if result.ok:
            current = self.state.data
            self._update(
                data=MyStoreData(
                    profile=current.profile, products=[result.value, *current.products]
                )
            )
        return result

    async def update_product(self, product_id: int, patch: ProductUpdate) -> Result:
        async def update() -> ProductView:
            self._owner_id()
            product = await self.gateway.update_product(product_id, self._store_id(), patch)
            if product is None:
                raise ValidationError("Product not found", field="product_id")
            return product

        result = await self._submit(update())
        if result.ok:
            current = self.state.data
            products = [result.value if p.id == product_id else p for p in current.products]
            self._update(data=MyStoreData(profile=current.profile, products=products))
        return result

    async def delete_product(self, product_id: int) -> Result:
        async def delete() -> bool:
            self._owner_id()
            return await self.gateway.delete_product(product_id, self._store_id())

        result = await self._submit(delete())
        if result.ok and result.value:
            current = self.state.data
            products = [p for p in current.products if p.id != product_id]
            self._update(data=MyStoreData(profile=current.profile, products=products))
        return result


class StoreDetailsScreen(Screen[StoreDetailsData]):
    """Public store page: details, a preview of recent reviews and the profile's tabs."""

    def __init__(self, gateway: DataGateway, session_store: SessionStore, store_id: int):
        super().__init__()
        self.gateway = gateway
        self.session_store = session_store
        self.store_id = store_id

    async def _fetch(self) -> StoreDetailsData:
        store = await self.gateway.fetch_business_profile(self.store_id)
        if store is None:
            raise FetchError(f"Store {self.store_id} not found")

        # Newest first; the summary covers all reviews, the preview only the latest
        reviews = await self.gateway.fetch_reviews_by_store(self.store_id)
        tabs = get_tabs_for_profile(store.profile_type.id)
        products = []
        if any(tab.key == "products" for tab in tabs):
            products = await self.gateway.fetch_products_by_store(self.store_id)

        return StoreDetailsData(
            store=store,
            recent_reviews=reviews[: settings.RECENT_REVIEWS_LIMIT],
            summary=summarize_reviews(reviews),
            user_has_reviewed=user_has_reviewed(reviews, self.session_store.snapshot.user_id),
            tabs=tabs,
            products=products,
        )


class StoreReviewsScreen(Screen[StoreReviewsData]):
    def __init__(self, gateway: DataGateway, store_id: int):
        super().__init__()
        self.gateway = gateway
        self.store_id = store_id

    async def _fetch(self) -> StoreReviewsData:
        reviews = await self.gateway.fetch_reviews_by_store(self.store_id)
        return StoreReviewsData(summary=summarize_reviews(reviews), reviews=reviews)


class ReviewFormScreen(Screen[Optional[ReviewView]]):
    """
    Write or edit the current user's review of a store.

    Loaded data is the user's existing review, if any. Guests are turned
    away before anything is sent.
    """

    def __init__(self, gateway: DataGateway, session_store: SessionStore, store_id: int):
        super().__init__()
        self.gateway = gateway
        self.session_store = session_store
        self.store_id = store_id

    @property
    def is_edit(self) -> bool:
        return self.state.data is not None

    async def _fetch(self) -> Optional[ReviewView]:
        session = self.session_store.snapshot
        if not session.is_signed_in:
            return None
        return await self.gateway.fetch_user_review(self.store_id, session.user_id)

    async def submit(self, rating: Optional[int], comment: Optional[str] = None) -> Result:
        async def send() -> ReviewView:
            session = self.session_store.snapshot
            require_member(session, GUEST_REVIEW_MESSAGE)
            return await self.gateway.submit_review(
                self.store_id,
                session.user_id,
                session.display_name,
                rating,
                (comment or "").strip(),
            )

        result = await self._submit(send())
        if result.ok:
            self._update(data=result.value)
        return result
