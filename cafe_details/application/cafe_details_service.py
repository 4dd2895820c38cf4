"""
Cafe Details Service - Merged View of One Cafe
==============================================

Combines two review sources for a single cafe:
- the live review store (app users' reviews, updated on every change)
- the place-details API (Google reviews, fetched once)

FLOW:
    1. open() subscribes to the cafe's reviews and the user's friends list
    2. open() starts the one-shot place-details fetch in the background
    3. snapshot() recomputes averages, the friends filter and menu keywords
       from whatever each source last delivered
    4. close() unsubscribes; a late fetch result is dropped

The store and the API client are injected, so either can be a test double.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .ports import PlaceDetailsProvider, ReviewStore
from .snapshot import SnapshotChannel
from ..domain.aggregation import average_rating, filter_relevant
from ..domain.errors import InvalidReviewError
from ..domain.keywords import DEFAULT_MENU_KEYWORDS, extract_keywords
from ..domain.models import (
    ANONYMOUS_USERNAME,
    Cafe,
    PlaceDetails,
    RemoteReview,
    Review,
    UserProfile,
)

logger = logging.getLogger(__name__)

MIN_RATING = 0
MAX_RATING = 5


@dataclass
class CafeDetailsView:
    """Everything the details screen shows, computed from one set of snapshots."""
    cafe: Cafe
    photo_url: Optional[str] = None
    reviews: List[Review] = field(default_factory=list)
    loading_reviews: bool = True
    friend_and_my_reviews: List[Review] = field(default_factory=list)
    your_avg_rating: Optional[float] = None
    google_reviews: List[RemoteReview] = field(default_factory=list)
    loading_google_reviews: bool = True
    google_avg_rating: Optional[float] = None
    google_total_ratings: int = 0
    menu_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cafe": self.cafe.to_dict(),
            "photo_url": self.photo_url,
            "reviews": [r.to_dict() for r in self.reviews],
            "loading_reviews": self.loading_reviews,
            "friend_and_my_reviews": [r.to_dict() for r in self.friend_and_my_reviews],
            "your_avg_rating": self.your_avg_rating,
            "google_reviews": [r.to_dict() for r in self.google_reviews],
            "loading_google_reviews": self.loading_google_reviews,
            "google_avg_rating": self.google_avg_rating,
            "google_total_ratings": self.google_total_ratings,
            "menu_keywords": self.menu_keywords,
        }


def validate_review(text: Optional[str], rating: Any) -> Tuple[str, float]:
    """
    Check a submitted review payload.

    Returns:
        (clean_text, rating)

    Raises:
        InvalidReviewError: rating missing, not a number, or outside 0-5.
    """
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        raise InvalidReviewError(f"Rating must be a number, got {rating!r}")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidReviewError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    if text is not None and not isinstance(text, str):
        raise InvalidReviewError("Review text must be a string")

    return (text or "").strip(), rating


class CafeDetailsSession:
    """
    Live details of one cafe for one (optional) signed-in user.

    USAGE:
        with CafeDetailsSession(cafe, store=db, places=PlacesClient(), user=profile) as session:
            session.wait_for_remote(timeout=5)
            view = session.snapshot()
            print(view.your_avg_rating, view.menu_keywords)
    """

    def __init__(
        self,
        cafe: Cafe,
        store: ReviewStore,
        places: PlaceDetailsProvider,
        user: Optional[UserProfile] = None,
        vocabulary: Sequence[str] = DEFAULT_MENU_KEYWORDS,
    ):
        self.cafe = cafe
        self.user = user
        self.vocabulary = tuple(vocabulary)
        self._store = store
        self._places = places

        self.reviews: SnapshotChannel[List[Review]] = SnapshotChannel("reviews", default=[])
        self.friends: SnapshotChannel[frozenset] = SnapshotChannel("friends", default=frozenset())
        self.remote: SnapshotChannel[PlaceDetails] = SnapshotChannel("place_details", default=PlaceDetails.empty())

        self._unsubscribers = []
        self._remote_done = threading.Event()
        self._fetch_thread: Optional[threading.Thread] = None
        self._opened = False
        self._closed = False

    @property
    def current_user_id(self) -> Optional[str]:
        return self.user.user_id if self.user else None

    # ── Lifecycle ──────────────────────────────────────────────────

    def open(self) -> "CafeDetailsSession":
        """Start both live feeds and the one-shot remote fetch."""
        if self._opened:
            return self
        self._opened = True

        if self.current_user_id:
            self._unsubscribers.append(
                self._store.subscribe_user(self.current_user_id, self._on_profile)
            )

        self._unsubscribers.append(
            self._store.subscribe_reviews(self.cafe.place_id, self._on_reviews)
        )

        self._fetch_thread = threading.Thread(
            target=self._fetch_remote,
            name=f"place-details-{self.cafe.place_id}",
            daemon=True,
        )
        self._fetch_thread.start()

        logger.info(f"Opened details session for cafe {self.cafe.place_id}")
        return self

    def close(self):
        """Unsubscribe the live feeds. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        while self._unsubscribers:
            unsubscribe = self._unsubscribers.pop()
            unsubscribe()

        logger.info(f"Closed details session for cafe {self.cafe.place_id}")

    def __enter__(self) -> "CafeDetailsSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def wait_for_remote(self, timeout: Optional[float] = None) -> bool:
        """Block until the remote fetch has resolved. Returns False on timeout."""
        return self._remote_done.wait(timeout)

    # ── Source callbacks ───────────────────────────────────────────

    def _on_reviews(self, reviews: List[Review]):
        if self._closed:
            return
        self.reviews.publish(list(reviews))

    def _on_profile(self, profile: UserProfile):
        if self._closed:
            return
        self.friends.publish(frozenset(profile.friends or []))

    def _fetch_remote(self):
        try:
            details = self._places.fetch_details(self.cafe.place_id)
        except Exception as e:
            # Providers are not supposed to raise; resolve the fetch anyway
            logger.exception(f"Place details provider failed for {self.cafe.place_id}: {e}")
            details = PlaceDetails.empty()

        if self._closed:
            logger.debug(f"Dropping late place details for {self.cafe.place_id}")
        else:
            self.remote.publish(details)
        self._remote_done.set()

    # ── Actions ────────────────────────────────────────────────────

    def submit_review(self, text: Optional[str], rating: Any) -> str:
        """
        Store a review from the current user.

        The store assigns the creation time and notifies every subscriber,
        including this session.
        """
        clean_text, rating = validate_review(text, rating)

        username = ANONYMOUS_USERNAME
        if self.user:
            username = self.user.email or self.user.display_name or ANONYMOUS_USERNAME

        return self._store.add_review(
            self.cafe.place_id,
            text=clean_text,
            rating=rating,
            user_id=self.current_user_id,
            username=username,
        )

    # ── View ───────────────────────────────────────────────────────

    def snapshot(self) -> CafeDetailsView:
        """Recompute the merged view from the latest snapshot of each source."""
        reviews = self.reviews.latest or []
        friend_ids = self.friends.latest or frozenset()
        details = self.remote.latest or PlaceDetails.empty()

        return CafeDetailsView(
            cafe=self.cafe,
            photo_url=self._places.photo_url(self.cafe),
            reviews=list(reviews),
            loading_reviews=not self.reviews.has_value,
            friend_and_my_reviews=filter_relevant(reviews, self.current_user_id, friend_ids),
            your_avg_rating=average_rating(reviews),
            google_reviews=list(details.reviews),
            loading_google_reviews=not self.remote.has_value,
            google_avg_rating=details.rating,
            google_total_ratings=details.user_ratings_total,
            menu_keywords=extract_keywords(details.reviews, self.vocabulary),
        )
