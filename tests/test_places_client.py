from unittest import mock
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from cafe_details.domain.models import Cafe, PlaceDetails
from cafe_details.infrastructure.config import PlacesSettings
from cafe_details.infrastructure.places import PlaceDetailsRequest, PlacePhotoRequest, PlacesClient

SETTINGS = PlacesSettings(api_key="test-key", timeout_seconds=3)


def make_client(json_body=None, side_effect=None, status_error=None):
    session = mock.Mock(spec=requests.Session)
    response = mock.Mock()
    response.json.return_value = json_body
    if status_error:
        response.raise_for_status.side_effect = status_error
    if side_effect:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = response
    return PlacesClient(settings=SETTINGS, session=session), session


def test_details_request_params():
    request = PlaceDetailsRequest(place_id="p 1&x", fields=("reviews", "rating"), api_key="k")

    assert request.params() == {"place_id": "p 1&x", "fields": "reviews,rating", "key": "k"}


def test_fetch_details_parses_result():
    client, session = make_client({
        "status": "OK",
        "result": {
            "rating": 4.6,
            "user_ratings_total": 318,
            "reviews": [
                {"author_name": "Ana", "rating": 5, "text": "matcha!"},
                {"author_name": "Ben", "rating": 3},
            ],
        },
    })

    details = client.fetch_details("place-1")

    assert details.rating == 4.6
    assert details.user_ratings_total == 318
    assert [r.author_name for r in details.reviews] == ["Ana", "Ben"]
    session.get.assert_called_once_with(
        SETTINGS.details_url,
        params={"place_id": "place-1", "fields": "reviews,rating,user_ratings_total", "key": "test-key"},
        timeout=3,
    )


def test_missing_fields_default():
    client, _ = make_client({"status": "OK", "result": {"rating": 0}})

    details = client.fetch_details("place-1")

    assert details == PlaceDetails(reviews=[], rating=None, user_ratings_total=0)


@pytest.mark.parametrize("error", [requests.ConnectionError("down"), requests.Timeout("slow")])
def test_network_failure_returns_empty_details(error):
    client, _ = make_client(side_effect=error)

    assert client.fetch_details("place-1") == PlaceDetails.empty()


def test_http_error_returns_empty_details():
    client, _ = make_client({"error": "nope"}, status_error=requests.HTTPError("500"))

    assert client.fetch_details("place-1") == PlaceDetails.empty()


def test_invalid_json_returns_empty_details():
    client, session = make_client()
    session.get.return_value.json.side_effect = ValueError("not json")

    assert client.fetch_details("place-1") == PlaceDetails.empty()


@pytest.mark.parametrize("body", [[], "text", {"status": "REQUEST_DENIED", "error_message": "bad key"}])
def test_unexpected_body_returns_empty_details(body):
    client, _ = make_client(body)

    assert client.fetch_details("place-1") == PlaceDetails.empty()


def test_photo_url_is_encoded():
    url = PlacePhotoRequest(photo_reference="a b/c", api_key="k&1", max_width=400).url(SETTINGS.photo_url)

    parsed = urlparse(url)
    assert parsed.netloc == "maps.googleapis.com"
    assert parse_qs(parsed.query) == {"maxwidth": ["400"], "photoreference": ["a b/c"], "key": ["k&1"]}


def test_photo_url_for_cafe():
    client, _ = make_client()

    assert client.photo_url(Cafe(place_id="p")) is None
    assert "photoreference=ref-1" in client.photo_url(Cafe(place_id="p", photo_reference="ref-1"))
