"""
Schemas for store reviews and their aggregate.

Reference: https://fastapi.tiangolo.com/tutorial/response-model/
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

ANONYMOUS_REVIEWER = "Anonymous User"


class ReviewView(BaseModel):
    """Store review as rendered by screens."""

    id: int
    store_id: int
    user_id: str
    user_name: str = Field(ANONYMOUS_REVIEWER, description="Author display name")
    rating: int = Field(..., ge=1, le=5, description="Rating value (1-5 stars)")
    comment: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewSummary(BaseModel):
    """Review count and mean rating for a store."""

    count: int = Field(0, ge=0)
    average_rating: float = Field(0.0, description="Arithmetic mean of ratings, 0.0 when there are none")


class StoreReviewsResponse(BaseModel):
    summary: ReviewSummary
    reviews: List[ReviewView] = Field(default_factory=list)
