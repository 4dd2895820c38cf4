import threading
import time
from datetime import datetime, timezone

from cafe_details.domain.models import Cafe
from cafe_details.infrastructure.persistence import Database


def test_reviews_are_newest_first(db):
    first = db.add_review("place-1", text="first", rating=3, user_id="u1", username="a@x.io")
    second = db.add_review("place-1", text="second", rating=5)
    db.add_review("place-2", text="other cafe", rating=1)

    reviews = db.get_reviews("place-1")

    assert [r.id for r in reviews] == [second, first]
    assert reviews[0].username == "Anonymous"
    assert reviews[0].user_id is None
    assert reviews[1].user_id == "u1"
    assert reviews[1].created_at < reviews[0].created_at


def test_same_timestamp_orders_later_insert_first(tmp_path):
    frozen = datetime(2026, 1, 1, tzinfo=timezone.utc)
    database = Database(str(tmp_path / "t.db"), clock=lambda: frozen)
    database.init()
    a = database.add_review("p", text="a", rating=1)
    b = database.add_review("p", text="b", rating=2)

    assert [r.id for r in database.get_reviews("p")] == [b, a]


def test_subscribe_delivers_snapshot_now_and_on_change(db):
    db.add_review("place-1", text="existing", rating=4)
    snapshots = []

    unsubscribe = db.subscribe_reviews("place-1", snapshots.append)
    db.add_review("place-1", text="new", rating=2)
    db.add_review("place-2", text="elsewhere", rating=2)
    unsubscribe()
    db.add_review("place-1", text="after unsubscribe", rating=1)

    assert [[r.text for r in snap] for snap in snapshots] == [
        ["existing"],
        ["new", "existing"],
    ]


def test_failing_subscriber_does_not_break_add(db):
    def broken(_):
        raise RuntimeError("boom")

    db.subscribe_reviews("place-1", broken)

    review_id = db.add_review("place-1", text="still stored", rating=5)

    assert db.get_reviews("place-1")[0].id == review_id


def test_delete_review_notifies(db):
    review_id = db.add_review("place-1", text="oops", rating=1)
    snapshots = []
    db.subscribe_reviews("place-1", snapshots.append)

    assert db.delete_review(review_id) is True
    assert db.delete_review(review_id) is False
    assert snapshots[-1] == []


def test_cafe_records_are_upserted(db):
    db.save_cafe(Cafe(place_id="place-1", name="Moss", vicinity="Elm St"))
    db.save_cafe(Cafe(place_id="place-1", name="Moss Cafe", vicinity="Elm St", photo_reference="r"))

    assert db.get_cafe("place-1") == Cafe(place_id="place-1", name="Moss Cafe",
                                          vicinity="Elm St", photo_reference="r")
    assert db.get_cafe("missing") is None


def test_users_and_friends(db):
    assert db.create_user("u1", "a@x.io", "Ana") is True
    assert db.create_user("u1", "dup@x.io", "Dup") is False

    assert db.add_friend("u1", "u2") is True
    assert db.add_friend("u1", "u3") is True
    assert db.add_friend("u1", "u2") is False
    assert db.add_friend("u1", "u1") is False

    profile = db.get_user("u1")
    assert profile.email == "a@x.io"
    assert profile.friends == ["u2", "u3"]

    assert db.remove_friend("u1", "u2") is True
    assert db.remove_friend("u1", "u2") is False
    assert db.get_friends("u1") == ["u3"]
    assert db.get_user("nobody") is None


def test_subscribe_user_tracks_friends(db):
    db.create_user("u1", "a@x.io", "Ana")
    profiles = []

    unsubscribe = db.subscribe_user("u1", profiles.append)
    db.add_friend("u1", "u2")
    unsubscribe()
    db.add_friend("u1", "u3")

    assert [p.friends for p in profiles] == [[], ["u2"]]


def test_subscribe_to_unknown_user_waits_for_creation(db):
    profiles = []

    db.subscribe_user("u9", profiles.append)
    assert profiles == []

    db.create_user("u9", "z@x.io", "Zed")
    assert [p.user_id for p in profiles] == ["u9"]


class SlowDatabase(Database):
    """Stalls the first flagged snapshot read until released."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.slow_once = False
        self.entered = threading.Event()
        self.release = threading.Event()

    def get_reviews(self, place_id):
        reviews = super().get_reviews(place_id)
        if self.slow_once:
            self.slow_once = False
            self.entered.set()
            self.release.wait(timeout=2)
        return reviews


def test_concurrent_adds_deliver_latest_snapshot_last(tmp_path):
    database = SlowDatabase(str(tmp_path / "slow.db"))
    database.init()
    snapshots = []
    database.subscribe_reviews("p", snapshots.append)
    database.slow_once = True

    first = threading.Thread(target=database.add_review, args=("p", "one", 3))
    first.start()
    assert database.entered.wait(timeout=2)

    second = threading.Thread(target=database.add_review, args=("p", "two", 4))
    second.start()
    time.sleep(0.1)
    database.release.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert len(snapshots[-1]) == 2
    assert [len(s) for s in snapshots] == sorted(len(s) for s in snapshots)
