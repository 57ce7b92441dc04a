"""
Business profile model for stores, service providers and other sellers.

One profile per owner: owner_id carries a unique constraint so a second
profile for the same user is rejected at write time.

Reference: https://docs.sqlalchemy.org/en/20/orm/basic_relationships.html
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lokalfinds.core.database import Base

if TYPE_CHECKING:
    from lokalfinds.models.product import Product
    from lokalfinds.models.review import StoreReview


class BusinessProfile(Base):
    """
    Business profile model representing a store/business listing.

    Attributes:
        id: Primary key (store ID)
        owner_id: Auth provider user ID of the owner (unique)
        name: Display name
        address: Street address
        hours: Free-form opening hours
        contact, email, website, description: Optional contact details
        social_links: Ordered list of {"platform": ..., "url": ...}
        profile_type: Profile type classifier id (e.g. "store", "freelancer")
        primary_type: Legacy alias for profile_type on older documents
        category: Business category classifier id
        cover_image_url, profile_image_url: Image host URLs
        created_at, updated_at: Timestamps
    """

    __tablename__ = "business_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    owner_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        index=True,
        comment="User ID of the profile owner (one profile per owner)",
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    hours: Mapped[str] = mapped_column(String(255), nullable=False)

    contact: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    social_links: Mapped[Optional[list[dict]]] = mapped_column(
        JSON,
        nullable=True,
        comment="Ordered list of social links: [{'platform': 'facebook', 'url': '...'}]",
    )

    # Classifiers
    profile_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    primary_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Legacy profile type field, read when profile_type is empty",
    )
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Images
    cover_image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    # Relationships
    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="store", cascade="all, delete-orphan"
    )
    reviews: Mapped[list["StoreReview"]] = relationship(
        "StoreReview", back_populates="store", cascade="all, delete-orphan"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<BusinessProfile(id={self.id}, owner_id={self.owner_id}, name='{self.name}')>"
