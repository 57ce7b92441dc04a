"""
Map stored rows to the view-models screens render.

Pure functions: no I/O, every optional field gets an explicit default and
classifier ids are resolved to display records.
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from lokalfinds.api.v1.schemas.product import ProductView
from lokalfinds.api.v1.schemas.review import ANONYMOUS_REVIEWER, ReviewView
from lokalfinds.api.v1.schemas.store import BusinessProfileView, SocialLinkView
from lokalfinds.models.business_profile import BusinessProfile
from lokalfinds.models.product import Product
from lokalfinds.models.review import StoreReview
from lokalfinds.services.classifiers import (
    get_category_info,
    get_profile_type_info,
    get_social_platform_info,
    normalize_social_url,
)


def format_price(price: Optional[Decimal]) -> str:
    """Two fraction digits, e.g. Decimal("12.5") -> "12.50"."""
    return f"{Decimal(price or 0):.2f}"


def to_social_links(raw_links: Optional[Iterable[dict]]) -> List[SocialLinkView]:
    """Resolve stored links in order, skipping entries without a URL."""
    links = []
    for raw in raw_links or []:
        url = (raw.get("url") or "").strip()
        if not url:
            continue
        platform = raw.get("platform") or "link"
        info = get_social_platform_info(platform)
        links.append(
            SocialLinkView(
                platform=platform,
                url=url,
                icon=info.icon,
                color=info.color,
                href=normalize_social_url(url),
            )
        )
    return links


def to_business_profile(profile: BusinessProfile) -> BusinessProfileView:
    return BusinessProfileView(
        id=profile.id,
        owner_id=profile.owner_id,
        name=profile.name,
        address=profile.address,
        hours=profile.hours,
        contact=profile.contact or "",
        email=profile.email or "",
        website=profile.website or "",
        description=profile.description or "",
        social_links=to_social_links(profile.social_links),
        # Older documents only carry primary_type
        profile_type=get_profile_type_info(profile.profile_type or profile.primary_type),
        category=get_category_info(profile.category),
        cover_image_url=profile.cover_image_url,
        profile_image_url=profile.profile_image_url,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def to_product(product: Product) -> ProductView:
    price = Decimal(product.price if product.price is not None else 0)
    return ProductView(
        id=product.id,
        store_id=product.store_id,
        name=product.name,
        price=price,
        price_display=format_price(price),
        description=product.description or "",
        in_stock=bool(product.in_stock) if product.in_stock is not None else True,
        image_url=product.image_url,
        created_at=product.created_at,
    )


def to_review(review: StoreReview) -> ReviewView:
    return ReviewView(
        id=review.id,
        store_id=review.store_id,
        user_id=review.user_id,
        user_name=(review.user_name or "").strip() or ANONYMOUS_REVIEWER,
        rating=review.rating,
        comment=review.comment or "",
        created_at=review.created_at,
        updated_at=review.updated_at,
    )
