"""
Store review model.

A user reviews a store at most once: (store_id, user_id) is unique and
editing a review overwrites the existing row.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lokalfinds.core.database import Base

if TYPE_CHECKING:
    from lokalfinds.models.business_profile import BusinessProfile


class StoreReview(Base):
    """
    Review of a business profile.

    Attributes:
        id: Primary key
        store_id: Foreign key to business_profiles
        user_id: Auth provider user ID of the author
        user_name: Author display name at the time of writing (optional)
        rating: Rating value (1-5)
        comment: Review text (optional)
        created_at: Timestamp when review was created
        updated_at: Timestamp when review was last updated
    """

    __tablename__ = "store_reviews"

    __table_args__ = (
        UniqueConstraint("store_id", "user_id", name="uq_store_reviews_store_user"),
        Index("ix_store_reviews_store_created", "store_id", "created_at"),  # Newest-first listing
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    store_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        nullable=False,
        comment="Reviewed business profile",
    )
    store: Mapped["BusinessProfile"] = relationship(
        "BusinessProfile", back_populates="reviews"
    )

    user_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        index=True,
        comment="User who wrote the review",
    )
    user_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating value (1-5 stars)",
    )
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Timestamp when review was created",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="Timestamp when review was last updated",
    )

    def __repr__(self) -> str:
        return (
            f"<StoreReview(id={self.id}, store_id={self.store_id}, "
            f"user_id={self.user_id}, rating={self.rating})>"
        )
