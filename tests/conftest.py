from datetime import datetime, timedelta, timezone

import pytest

from cafe_details.application.ports import PlaceDetailsProvider
from cafe_details.domain.models import Cafe, PlaceDetails, RemoteReview
from cafe_details.infrastructure.persistence import Database


class TickingClock:
    """Returns a later timestamp on every call."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


class FakePlaces(PlaceDetailsProvider):
    """In-memory place-details provider."""

    def __init__(self, details=None, error=None):
        self.details = details if details is not None else PlaceDetails.empty()
        self.error = error
        self.calls = []

    def fetch_details(self, place_id):
        self.calls.append(place_id)
        if self.error:
            raise self.error
        return self.details

    def photo_url(self, cafe):
        if not cafe.photo_reference:
            return None
        return f"https://photos.test/{cafe.photo_reference}"

    def close(self):
        pass


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "reviews.db"), clock=TickingClock())
    database.init()
    return database


@pytest.fixture
def cafe():
    return Cafe(place_id="place-1", name="Moss Cafe", vicinity="12 Elm St", photo_reference="ref-1")


@pytest.fixture
def google_details():
    return PlaceDetails(
        reviews=[
            RemoteReview(author_name="Ana", text="Great matcha latte and matcha cake", rating=5),
            RemoteReview(author_name="Ben", text="Loved the tiramisu", rating=4),
            RemoteReview(author_name="Cy", text="Tiramisu and a sandwich", rating=3),
        ],
        rating=4.4,
        user_ratings_total=212,
    )
