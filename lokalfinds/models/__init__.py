"""
Database models
All SQLAlchemy models should be defined here or imported here
"""

from lokalfinds.core.database import Base
from lokalfinds.models.business_profile import BusinessProfile
from lokalfinds.models.product import Product
from lokalfinds.models.review import StoreReview

__all__ = [
    "Base",
    "BusinessProfile",
    "Product",
    "StoreReview",
]
