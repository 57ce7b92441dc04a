"""
Review aggregation for store pages.
"""

from typing import Iterable, Optional, Sequence, Tuple

from lokalfinds.api.v1.schemas.review import ReviewSummary, ReviewView

MAX_STARS = 5


def summarize_reviews(reviews: Sequence[ReviewView]) -> ReviewSummary:
    """
    Review count and arithmetic mean rating.

    The mean is 0.0 (not NaN) for a store without reviews. No weighting and
    no outlier filtering.
    """
    count = len(reviews)
    if count == 0:
        return ReviewSummary(count=0, average_rating=0.0)
    total = sum(review.rating for review in reviews)
    return ReviewSummary(count=count, average_rating=total / count)


def user_has_reviewed(reviews: Iterable[ReviewView], user_id: Optional[str]) -> bool:
    """Whether user_id authored one of the reviews; decides "write" vs "edit your review"."""
    if not user_id:
        return False
    return any(review.user_id == user_id for review in reviews)


def format_average(average_rating: float) -> str:
    """One decimal place, "0.0" for stores without reviews."""
    return f"{average_rating:.1f}" if average_rating > 0 else "0.0"


def star_breakdown(rating: float) -> Tuple[int, int, int]:
    """
    Number of (full, half, empty) stars for a 5-star display.

    A fractional part of any size shows as one half star.
    """
    rating = max(0.0, min(float(rating), float(MAX_STARS)))
    full = int(rating)
    half = 1 if rating != full else 0
    return full, half, MAX_STARS - full - half
