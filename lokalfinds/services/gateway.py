"""
Remote data gateway for business profiles, products and store reviews.

Every read runs a single filtered query in its own session and returns
view-models; any backend failure surfaces as FetchError carrying the
original exception. Writes surface backend failures as WriteError.

Reference: https://docs.sqlalchemy.org/en/20/orm/queryguide/
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lokalfinds.api.v1.schemas.product import ProductCreate, ProductUpdate, ProductView
from lokalfinds.api.v1.schemas.review import ReviewView
from lokalfinds.api.v1.schemas.store import (
    BusinessProfileCreate,
    BusinessProfileUpdate,
    BusinessProfileView,
)
from lokalfinds.core.exceptions import FetchError, ValidationError, WriteError
from lokalfinds.models.business_profile import BusinessProfile
from lokalfinds.models.product import Product
from lokalfinds.models.review import StoreReview
from lokalfinds.services.image import get_optimized_image_url
from lokalfinds.services.mappers import to_business_profile, to_product, to_review
from lokalfinds.services.validation import (
    parse_price,
    require_fields,
    validate_email,
    validate_rating,
)

logger = logging.getLogger(__name__)

# Backend failures: driver/ORM errors and connection-level OS errors
BACKEND_ERRORS = (SQLAlchemyError, OSError)

REQUIRED_PROFILE_FIELDS = "Please fill in all required fields"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DataGateway:
    """Queries and writes against the document store"""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def _read(self, query, description: str) -> List[Any]:
        try:
            async with self._session_maker() as db:
                result = await db.execute(query)
                return list(result.scalars().all())
        except BACKEND_ERRORS as e:
            logger.error(
                f"Failed to fetch {description}: {type(e).__name__}: {e}", exc_info=True
            )
            raise FetchError(f"Failed to fetch {description}", cause=e) from e

    # ------------------------------------------------------------------
    # Business profiles
    # ------------------------------------------------------------------

    async def fetch_business_profile_by_owner(
        self, owner_id: str
    ) -> Optional[BusinessProfileView]:
        """
        Get the business profile owned by a user.

        owner_id is unique for new writes; rows predating the constraint are
        resolved deterministically by taking the oldest one.

        Args:
            owner_id: Auth provider user ID

        Returns:
            BusinessProfileView if the user has a profile, None otherwise

        Raises:
            FetchError: If the backend query fails
        """
        query = (
            select(BusinessProfile)
            .where(BusinessProfile.owner_id == owner_id)
            .order_by(BusinessProfile.created_at, BusinessProfile.id)
            .limit(1)
        )
        rows = await self._read(query, f"business profile for owner {owner_id}")
        return to_business_profile(rows[0]) if rows else None

    async def fetch_business_profile(self, profile_id: int) -> Optional[BusinessProfileView]:
        query = select(BusinessProfile).where(BusinessProfile.id == profile_id)
        rows = await self._read(query, f"business profile {profile_id}")
        return to_business_profile(rows[0]) if rows else None

    async def fetch_business_profiles(self) -> List[BusinessProfileView]:
        """All business profiles for the directory, ordered by name."""
        query = select(BusinessProfile).order_by(BusinessProfile.name, BusinessProfile.id)
        rows = await self._read(query, "business profiles")
        return [to_business_profile(row) for row in rows]

    async def create_business_profile(
        self, owner_id: str, data: BusinessProfileCreate
    ) -> BusinessProfileView:
        """
        Create the owner's business profile.

        Raises:
            ValidationError: If required fields are empty, the email is
                malformed, or the owner already has a profile
            WriteError: If the backend write fails
        """
        require_fields(
            REQUIRED_PROFILE_FIELDS,
            name=data.name,
            address=data.address,
            hours=data.hours,
        )
        email = validate_email(data.email) if data.email else None

        now = _utcnow()
        profile = BusinessProfile(
            owner_id=owner_id,
            name=data.name.strip(),
            address=data.address.strip(),
            hours=data.hours.strip(),
            contact=(data.contact or "").strip() or None,
            email=email,
            website=(data.website or "").strip() or None,
            description=(data.description or "").strip() or None,
            social_links=[link.model_dump() for link in data.social_links],
            profile_type=data.profile_type,
            primary_type=None,
            category=data.category,
            cover_image_url=data.cover_image_url,
            profile_image_url=data.profile_image_url,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self._session_maker() as db:
                existing = await db.execute(
                    select(BusinessProfile.id).where(BusinessProfile.owner_id == owner_id)
                )
                if existing.first() is not None:
                    raise ValidationError(
                        "You already have a business profile", field="owner_id"
                    )
                db.add(profile)
                await db.commit()
                await db.refresh(profile)
        except IntegrityError as e:
            # Concurrent create for the same owner lost the race on the unique constraint
            logger.warning(f"Duplicate business profile for owner {owner_id}: {e}")
            raise ValidationError(
                "You already have a business profile", field="owner_id"
            ) from e
        except BACKEND_ERRORS as e:
            logger.error(
                f"Failed to create business profile for {owner_id}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise WriteError("Failed to create business profile", cause=e) from e

        logger.info(f"Business profile created: {profile.id} (owner {owner_id})")
        return to_business_profile(profile)

    async def update_business_profile(
        self, profile_id: int, owner_id: str, patch: BusinessProfileUpdate
    ) -> Optional[BusinessProfileView]:
        """
        Apply a partial update to a profile. Only the owner may update it.

        Returns:
            Updated view, or None if the profile does not exist
        """
        updates = patch.model_dump(exclude_unset=True)
        for field in ("name", "address", "hours"):
            if field in updates:
                require_fields(REQUIRED_PROFILE_FIELDS, **{field: updates[field]})
                updates[field] = updates[field].strip()
        if updates.get("email"):
            updates["email"] = validate_email(updates["email"])

        try:
            async with self._session_maker() as db:
                profile = await db.get(BusinessProfile, profile_id)
                if profile is None:
                    return None
                if profile.owner_id != owner_id:
                    raise ValidationError("Only the owner can edit this profile")
                for field, value in updates.items():
                    setattr(profile, field, value)
                profile.updated_at = _utcnow()
                await db.commit()
                await db.refresh(profile)
        except BACKEND_ERRORS as e:
            logger.error(
                f"Failed to update business profile {profile_id}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise WriteError("Failed to update business profile", cause=e) from e

        logger.info(f"Business profile updated: {profile_id} ({', '.join(updates) or 'no fields'})")
        return to_business_profile(profile)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def fetch_products_by_store(self, store_id: int) -> List[ProductView]:
        """
        Get the products listed by a store.

        Raises:
            FetchError: If the backend query fails
        """
        query = select(Product).where(Product.store_id == store_id)
        rows = await self._read(query, f"products for store {store_id}")
        return [to_product(row) for row in rows]

    async def add_product(self, store_id: int, data: ProductCreate) -> ProductView:
        require_fields(name=data.name)
        price = parse_price(data.price)
        now = _utcnow()
        product = Product(
            store_id=store_id,
            name=data.name.strip(),
            price=price,
            description=(data.description or "").strip() or None,
            in_stock=data.in_stock,
            image_url=data.image_url,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self._session_maker() as db:
                db.add(product)
                await db.commit()
                await db.refresh(product)
        except BACKEND_ERRORS as e:
            logger.error(
                f"Failed to add product to store {store_id}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise WriteError("Failed to add product", cause=e) from e

        logger.info(f"Product {product.id} added to store {store_id}")
        return to_product(product)

    async def update_product(
        self, product_id: int, store_id: int, patch: ProductUpdate
    ) -> Optional[ProductView]:
        """Partial update of a product belonging to store_id; None if not found."""
        updates = patch.model_dump(exclude_unset=True)
        if "name" in updates:
            require_fields(name=updates["name"])
            updates["name"] = updates["name"].strip()
        if "price" in updates:
            updates["price"] = parse_price(updates["price"])

        try:
            async with self._session_maker() as db:
                product = await db.get(Product, product_id)
                if product is None or product.store_id != store_id:
                    return None
                for field, value in updates.items():
                    setattr(product, field, value)
                product.updated_at = _utcnow()
                await db.commit()
                await db.refresh(product)
        except BACKEND_ERRORS as e:
            logger.error(
                f"Failed to update product {product_id}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise WriteError("Failed to update product", cause=e) from e

        return to_product(product)

    async def delete_product(self, product_id: int, store_id: int) -> bool:
        """Delete a product belonging to store_id. Returns False if not found."""
        try:
            async with self._session_maker() as db:
                product = await db.get(Product, product_id)
                if product is None or product.store_id != store_id:
                    return False
                await db.delete(product)
                await db.commit()
        except BACKEND_ERRORS as e:
            logger.error(
                f"Failed to delete product {product_id}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise WriteError("Failed to delete product", cause=e) from e

        logger.info(f"Product {product_id} deleted from store {store_id}")
        return True

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def fetch_reviews_by_store(
        self, store_id: int, limit: Optional[int] = None
    ) -> List[ReviewView]:
        """
        Get reviews for a store, newest first.

        Args:
            store_id: Business profile ID
            limit: Optional maximum number of reviews (e.g. a preview of 3)

        Raises:
            FetchError: If the backend query fails
        """
        query = (
            select(StoreReview)
            .where(StoreReview.store_id == store_id)
            .order_by(StoreReview.created_at.desc(), StoreReview.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        rows = await self._read(query, f"reviews for store {store_id}")
        return [to_review(row) for row in rows]

    async def fetch_user_review(self, store_id: int, user_id: str) -> Optional[ReviewView]:
        """The user's own review of a store, used to prefill the edit form."""
        query = select(StoreReview).where(
            StoreReview.store_id == store_id, StoreReview.user_id == user_id
        )
        rows = await self._read(query, f"review by {user_id} for store {store_id}")
        return to_review(rows[0]) if rows else None

    async def submit_review(
        self,
        store_id: int,
        user_id: str,
        user_name: Optional[str],
        rating: Optional[int],
        comment: Optional[str] = None,
    ) -> ReviewView:
        """
        Write the user's review of a store.

        A user has at most one review per store: an existing review is
        overwritten (rating, comment, display name) and keeps its created_at.

        Raises:
            ValidationError: If the rating is missing or out of range
            WriteError: If the backend write fails
        """
        rating = validate_rating(rating)
        comment = (comment or "").strip() or None
        now = _utcnow()
        try:
            async with self._session_maker() as db:
                result = await db.execute(
                    select(StoreReview).where(
                        StoreReview.store_id == store_id, StoreReview.user_id == user_id
                    )
                )
                review = result.scalar_one_or_none()
                if review is None:
                    review = StoreReview(
                        store_id=store_id,
                        user_id=user_id,
                        created_at=now,
                    )
                    db.add(review)
                review.user_name = user_name
                review.rating = rating
                review.comment = comment
                review.updated_at = now
                await db.commit()
                await db.refresh(review)
        except BACKEND_ERRORS as e:
            logger.error(
                f"Failed to save review by {user_id} for store {store_id}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            raise WriteError("Failed to submit review", cause=e) from e

        logger.info(f"Review {review.id} saved for store {store_id} (rating {rating})")
        return to_review(review)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def rewrite_image_url(
        self,
        url: Optional[str],
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: Union[str, int] = "auto",
        format: str = "auto",
    ) -> Optional[str]:
        """Pure string rewrite of an image host URL; see get_optimized_image_url."""
        return get_optimized_image_url(url, width, height, quality, format)
