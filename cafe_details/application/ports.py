"""
Ports - Abstractions for the Cafe Details Collaborators
=======================================================

The details session only talks to these interfaces. The SQLite store and
the Google Places client implement them; tests pass in-memory doubles.

USAGE:
    session = CafeDetailsSession(cafe, store=Database(), places=PlacesClient())
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..domain.models import Cafe, PlaceDetails, Review, UserProfile

Unsubscribe = Callable[[], None]
ReviewsListener = Callable[[List[Review]], None]
ProfileListener = Callable[[UserProfile], None]


class ReviewStore(ABC):
    """
    Live review store.
    Subscriptions deliver a full snapshot on subscribe and after every change.
    """

    @abstractmethod
    def add_review(
        self,
        place_id: str,
        text: str,
        rating: float,
        user_id: Optional[str] = None,
        username: str = "Anonymous",
    ) -> str:
        """Append a review; the store assigns id and creation time. Returns the id."""
        ...

    @abstractmethod
    def get_reviews(self, place_id: str) -> List[Review]:
        """Current reviews of a cafe, newest first."""
        ...

    @abstractmethod
    def subscribe_reviews(self, place_id: str, callback: ReviewsListener) -> Unsubscribe:
        """Receive the cafe's review snapshot now and on every change."""
        ...

    @abstractmethod
    def subscribe_user(self, user_id: str, callback: ProfileListener) -> Unsubscribe:
        """Receive the user's profile now (if it exists) and on every change."""
        ...


class PlaceDetailsProvider(ABC):
    """Source of third-party reviews and ratings for a cafe."""

    @abstractmethod
    def fetch_details(self, place_id: str) -> PlaceDetails:
        """One-shot lookup. Must not raise; failures return PlaceDetails.empty()."""
        ...

    @abstractmethod
    def photo_url(self, cafe: Cafe) -> Optional[str]:
        """Displayable URL of the cafe's photo, or None."""
        ...
