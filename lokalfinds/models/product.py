"""
Product model for items listed by a business profile.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lokalfinds.core.database import Base

if TYPE_CHECKING:
    from lokalfinds.models.business_profile import BusinessProfile


class Product(Base):
    """
    Product model

    Attributes:
        id: Primary key
        store_id: Foreign key to business_profiles (owning store)
        name: Product name
        price: Decimal price, two fraction digits
        description: Optional description
        in_stock: Availability flag
        image_url: Image host URL
        created_at, updated_at: Timestamps
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    store_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Business profile that lists this product",
    )
    store: Mapped["BusinessProfile"] = relationship(
        "BusinessProfile", back_populates="products"
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    in_stock: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

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
        return f"<Product(id={self.id}, store_id={self.store_id}, name='{self.name}')>"
