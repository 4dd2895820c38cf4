"""
Domain Models - Cafes and Reviews
=================================

Plain dataclasses shared by every layer. Reviews come from two places:
- the local review store (Review), written by users of this app
- the place-details API (RemoteReview), read-only

Both shapes expose `text`, `rating` and `user_id` so the domain functions
can treat them alike.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .fields import to_rating


ANONYMOUS_USERNAME = "Anonymous"


@dataclass
class Review:
    """A review stored in the local review store."""
    text: Optional[str] = None
    rating: float = 0
    user_id: Optional[str] = None
    username: str = ANONYMOUS_USERNAME
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[str] = None    # Assigned by the store

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data


@dataclass
class RemoteReview:
    """A review returned by the place-details API."""
    author_name: str = ""
    text: Optional[str] = None
    rating: float = 0
    time: Optional[int] = None                  # Epoch seconds
    relative_time_description: str = ""
    user_id: Optional[str] = None               # Never sent by the API
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteReview":
        """Build from one entry of the API's `result.reviews` array."""
        if not isinstance(data, dict):
            return cls()

        text = data.get("text")
        review_time = data.get("time")
        return cls(
            author_name=str(data.get("author_name") or ""),
            text=text if isinstance(text, str) else None,
            rating=to_rating(data.get("rating")),
            time=review_time if isinstance(review_time, int) else None,
            relative_time_description=str(data.get("relative_time_description") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Cafe:
    """Cafe record supplied by the caller (usually a place-search result)."""
    place_id: str
    name: str = ""
    vicinity: str = ""
    photo_reference: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Cafe":
        """
        Build from a place-search JSON result.

        Only the first photo is kept, the same one the details view shows.
        """
        photos = data.get("photos") or []
        photo_reference = None
        if photos and isinstance(photos[0], dict):
            photo_reference = photos[0].get("photo_reference") or None

        return cls(
            place_id=data["place_id"],
            name=data.get("name") or "",
            vicinity=data.get("vicinity") or "",
            photo_reference=photo_reference,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PlaceDetails:
    """Reviews and rating summary from the place-details API."""
    reviews: List[RemoteReview] = field(default_factory=list)
    rating: Optional[float] = None
    user_ratings_total: int = 0

    @classmethod
    def empty(cls) -> "PlaceDetails":
        """The result used whenever the API cannot be reached or parsed."""
        return cls()


@dataclass
class UserProfile:
    """A user's profile document, including their friends list."""
    user_id: str
    email: str = ""
    display_name: str = ""
    friends: List[str] = field(default_factory=list)
