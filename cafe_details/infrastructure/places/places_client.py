"""
Places Client - Google Place Details Integration
================================================

ARCHITECTURAL DECISION:
- One GET per cafe, no retry, no pagination
- Requests are typed parameter objects, never hand-built URLs,
  so place ids and keys are always URL-encoded
- Any failure degrades to PlaceDetails.empty(); callers never see an error

USAGE:
    client = PlacesClient()
    details = client.fetch_details("ChIJN1t_tDeuEmsRUsoyG83frY4")
    print(details.rating, details.user_ratings_total)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import requests

from ..config import PlacesSettings, get_settings
from ...application.ports import PlaceDetailsProvider
from ...domain.models import Cafe, PlaceDetails, RemoteReview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceDetailsRequest:
    """Parameters of a place-details lookup."""
    place_id: str
    fields: Tuple[str, ...]
    api_key: str

    def params(self) -> Dict[str, str]:
        return {
            "place_id": self.place_id,
            "fields": ",".join(self.fields),
            "key": self.api_key,
        }


@dataclass(frozen=True)
class PlacePhotoRequest:
    """Parameters of a place photo URL."""
    photo_reference: str
    api_key: str
    max_width: int = 400

    def params(self) -> Dict[str, str]:
        return {
            "maxwidth": str(self.max_width),
            "photoreference": self.photo_reference,
            "key": self.api_key,
        }

    def url(self, base_url: str) -> str:
        """Full photo URL; the image is fetched by whoever displays it."""
        return requests.Request("GET", base_url, params=self.params()).prepare().url


class PlacesClient(PlaceDetailsProvider):
    """
    Client for the place-details endpoint.

    FALLBACK BEHAVIOR:
    - Network error or timeout: empty details
    - Non-2xx status or API error status: empty details
    - Body that is not the expected JSON: empty details
    """

    def __init__(self, settings: Optional[PlacesSettings] = None, session: Optional[requests.Session] = None):
        self._settings = settings or get_settings().places
        self._session = session or requests.Session()

        if not self._settings.api_key:
            logger.warning(
                "No GOOGLE_MAPS_API_KEY set. "
                "Place details requests will be rejected by the API."
            )

    def details_request(self, place_id: str) -> PlaceDetailsRequest:
        return PlaceDetailsRequest(
            place_id=place_id,
            fields=tuple(self._settings.details_fields),
            api_key=self._settings.api_key,
        )

    def fetch_details(self, place_id: str) -> PlaceDetails:
        """
        Fetch reviews and rating summary for a place.

        Args:
            place_id: Google place id of the cafe.

        Returns:
            PlaceDetails, empty when anything goes wrong.
        """
        request = self.details_request(place_id)

        try:
            response = self._session.get(
                self._settings.details_url,
                params=request.params(),
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()

        except requests.Timeout:
            logger.warning(f"Place details timeout for {place_id}")
            return PlaceDetails.empty()

        except requests.RequestException as e:
            logger.warning(f"Place details request failed for {place_id}: {e}")
            return PlaceDetails.empty()

        except ValueError as e:
            logger.warning(f"Place details response for {place_id} is not JSON: {e}")
            return PlaceDetails.empty()

        return self._parse_details(place_id, data)

    def _parse_details(self, place_id: str, data: Any) -> PlaceDetails:
        """Convert the JSON body into PlaceDetails."""
        if not isinstance(data, dict):
            logger.warning(f"Unexpected place details body for {place_id}")
            return PlaceDetails.empty()

        status = data.get("status")
        if status and status != "OK":
            logger.warning(
                f"Place details for {place_id} returned {status}: "
                f"{data.get('error_message', '')}"
            )

        result = data.get("result")
        if not isinstance(result, dict):
            return PlaceDetails.empty()

        raw_reviews = result.get("reviews") or []
        if not isinstance(raw_reviews, list):
            raw_reviews = []

        rating = result.get("rating")
        if isinstance(rating, bool) or not isinstance(rating, (int, float)) or not rating:
            rating = None

        total = result.get("user_ratings_total")
        if isinstance(total, bool) or not isinstance(total, int):
            total = 0

        details = PlaceDetails(
            reviews=[RemoteReview.from_api(item) for item in raw_reviews],
            rating=rating,
            user_ratings_total=total,
        )
        logger.debug(f"Fetched {len(details.reviews)} Google reviews for {place_id}")
        return details

    def photo_url(self, cafe: Cafe) -> Optional[str]:
        """URL of the cafe's first photo, or None when it has none."""
        if not cafe.photo_reference:
            return None

        request = PlacePhotoRequest(
            photo_reference=cafe.photo_reference,
            api_key=self._settings.api_key,
            max_width=self._settings.photo_max_width,
        )
        return request.url(self._settings.photo_url)

    def close(self):
        self._session.close()
