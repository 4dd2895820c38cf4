"""
Cafe Details Printer
====================

Opens a details session for one cafe and prints the merged view:
local reviews, the friends filter, Google reviews and menu keywords.

    python show_cafe.py ChIJN1t_tDeuEmsRUsoyG83frY4 --name "Blue Bottle" --user u1
"""

import argparse
import logging

from cafe_details.application import CafeDetailsSession
from cafe_details.domain.models import Cafe
from cafe_details.infrastructure.config import get_settings
from cafe_details.infrastructure.persistence import init_database
from cafe_details.infrastructure.places import PlacesClient

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Print a cafe's merged review details")
    parser.add_argument("place_id", help="Google place id of the cafe")
    parser.add_argument("--name", default="", help="Cafe name (stored for later lookups)")
    parser.add_argument("--vicinity", default="", help="Cafe address")
    parser.add_argument("--photo-reference", default=None, help="Photo reference from place search")
    parser.add_argument("--user", default=None, help="Id of the signed-in user")
    parser.add_argument("--wait", type=float, default=None,
                        help="Seconds to wait for Google reviews (default: API timeout)")
    return parser.parse_args(argv)


def print_view(view):
    """Print a CafeDetailsView."""
    print("\n" + "=" * 60)
    print(f"   {view.cafe.name or view.cafe.place_id}")
    if view.cafe.vicinity:
        print(f"   {view.cafe.vicinity}")
    if view.photo_url:
        print(f"   Photo: {view.photo_url}")
    print("=" * 60)

    rating = view.your_avg_rating if view.your_avg_rating is not None else "-"
    print(f"\nApp reviews: {len(view.reviews)} (avg {rating})")
    for review in view.reviews:
        print(f"   [{review.rating}] {review.username}: {review.text or ''}")

    print(f"\nYou & friends: {len(view.friend_and_my_reviews)}")
    for review in view.friend_and_my_reviews:
        print(f"   [{review.rating}] {review.username}: {review.text or ''}")

    if view.loading_google_reviews:
        print("\nGoogle reviews: still loading")
    else:
        google_rating = view.google_avg_rating if view.google_avg_rating is not None else "-"
        print(f"\nGoogle: {google_rating} from {view.google_total_ratings} ratings")
        for review in view.google_reviews:
            print(f"   [{review.rating}] {review.author_name}: {(review.text or '')[:80]}")

    keywords = ", ".join(view.menu_keywords) or "none"
    print(f"\nPopular on the menu: {keywords}\n")


def main(argv=None):
    args = parse_args(argv)
    settings = get_settings()

    for issue in settings.validate():
        print(issue)

    db = init_database(str(settings.store.database_file))
    cafe = Cafe(place_id=args.place_id, name=args.name, vicinity=args.vicinity,
                photo_reference=args.photo_reference)
    if args.name:
        db.save_cafe(cafe)
    else:
        cafe = db.get_cafe(args.place_id) or cafe

    user = None
    if args.user:
        user = db.get_user(args.user)
        if not user:
            logger.warning(f"Unknown user {args.user}, showing anonymous view")

    places = PlacesClient(settings.places)
    wait = args.wait if args.wait is not None else settings.places.timeout_seconds

    try:
        with CafeDetailsSession(cafe, store=db, places=places, user=user,
                                vocabulary=settings.keywords.vocabulary) as session:
            session.wait_for_remote(timeout=wait)
            print_view(session.snapshot())
    finally:
        places.close()


if __name__ == "__main__":
    main()
