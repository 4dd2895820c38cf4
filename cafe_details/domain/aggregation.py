"""
Review Aggregation
==================

Summaries over the locally stored reviews of a cafe:
- average_rating: mean star rating shown as "your community's" rating
- filter_relevant: the reviews written by the current user or their friends

Both functions are pure, so they can be recomputed on every new snapshot
of the review collection.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Collection, Iterable, List, Optional

from .fields import get_field, to_rating


def average_rating(reviews: Iterable[Any]) -> Optional[float]:
    """
    Mean rating rounded to one decimal place.

    Exact halves round up (2.25 -> 2.3), as a display rating would. Reviews
    without a rating count as 0. Returns None when there are no reviews.
    """
    ratings = [to_rating(get_field(review, "rating")) for review in reviews]
    if not ratings:
        return None
    mean = sum(ratings) / len(ratings)
    return float(Decimal(mean).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def filter_relevant(
    reviews: Iterable[Any],
    current_user_id: Optional[str],
    friend_ids: Collection[str],
) -> List[Any]:
    """
    Keep the reviews authored by the current user or one of their friends.

    Input order is preserved. With no current user only the friends test
    applies; reviews without an author are never kept.
    """
    relevant = []
    for review in reviews:
        author = get_field(review, "user_id", "userId")
        if author is None:
            continue
        if (current_user_id is not None and author == current_user_id) or author in friend_ids:
            relevant.append(review)
    return relevant
