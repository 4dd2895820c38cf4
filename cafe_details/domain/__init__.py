# Domain Layer
# ============
# Pure review logic with no external dependencies:
# - models.py: Cafe, Review, RemoteReview, PlaceDetails, UserProfile
# - keywords.py: menu keyword ranking
# - aggregation.py: average rating and friends filter

from .errors import CafeDetailsError, CafeNotFoundError, InvalidReviewError
from .models import Cafe, PlaceDetails, RemoteReview, Review, UserProfile, ANONYMOUS_USERNAME
from .keywords import DEFAULT_MENU_KEYWORDS, count_keywords, extract_keywords
from .aggregation import average_rating, filter_relevant

__all__ = [
    "CafeDetailsError",
    "CafeNotFoundError",
    "InvalidReviewError",
    "Cafe",
    "PlaceDetails",
    "RemoteReview",
    "Review",
    "UserProfile",
    "ANONYMOUS_USERNAME",
    "DEFAULT_MENU_KEYWORDS",
    "count_keywords",
    "extract_keywords",
    "average_rating",
    "filter_relevant",
]
