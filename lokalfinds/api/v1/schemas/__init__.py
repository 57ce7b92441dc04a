"""
Pydantic schemas for API request/response models and screen view-models
"""

from lokalfinds.api.v1.schemas.product import ProductView
from lokalfinds.api.v1.schemas.review import ReviewSummary, ReviewView
from lokalfinds.api.v1.schemas.store import BusinessProfileView

__all__ = ["BusinessProfileView", "ProductView", "ReviewSummary", "ReviewView"]
