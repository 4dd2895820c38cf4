"""
SQLite Database Repository - Live Review Store
==============================================

Stores cafe reviews, cafe records and user profiles (with friends lists).

Subscribers get a full snapshot as soon as they subscribe and again after
every change that touches what they watch, mirroring a live document store.
"""

import sqlite3
import logging
import threading
import uuid
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ...application.ports import (
    ProfileListener,
    ReviewsListener,
    ReviewStore,
    Unsubscribe,
)
from ...domain.models import ANONYMOUS_USERNAME, Cafe, Review, UserProfile

logger = logging.getLogger(__name__)

DATABASE_FILE = "cafe_details.db"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Database(ReviewStore):
    """
    SQLite database for Cafe Details.

    Usage:
        db = Database()
        db.init()

        # Watch a cafe's reviews
        unsubscribe = db.subscribe_reviews("place-1", lambda reviews: print(len(reviews)))

        # Every subscriber of place-1 is notified
        db.add_review("place-1", text="Lovely matcha", rating=5, user_id="u1")
        unsubscribe()
    """

    def __init__(self, db_path: str = DATABASE_FILE, clock: Callable[[], datetime] = _utc_now):
        self.db_path = str(db_path)
        self._clock = clock
        self._lock = threading.Lock()
        self._review_listeners: Dict[str, List[ReviewsListener]] = defaultdict(list)
        self._profile_listeners: Dict[str, List[ProfileListener]] = defaultdict(list)
        # One lock per watched key: a snapshot is read and delivered under it,
        # so subscribers always see snapshots in commit order
        self._notify_locks: Dict[str, threading.RLock] = defaultdict(threading.RLock)

    def _notify_lock(self, key: str) -> threading.RLock:
        with self._lock:
            return self._notify_locks[key]

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def init(self):
        """Initialize database tables."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS reviews (
                    id TEXT PRIMARY KEY,
                    place_id TEXT NOT NULL,
                    text TEXT DEFAULT '',
                    rating REAL DEFAULT 0,
                    user_id TEXT,
                    username TEXT DEFAULT 'Anonymous',
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_reviews_place
                ON reviews (place_id, created_at)
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS cafes (
                    place_id TEXT PRIMARY KEY,
                    name TEXT DEFAULT '',
                    vicinity TEXT DEFAULT '',
                    photo_reference TEXT
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT DEFAULT '',
                    display_name TEXT DEFAULT ''
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS friendships (
                    user_id TEXT NOT NULL,
                    friend_id TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(user_id, friend_id)
                )
            """)

            logger.info(f"Database initialized: {self.db_path}")

    # ── Reviews ────────────────────────────────────────────────────

    def add_review(
        self,
        place_id: str,
        text: str,
        rating: float,
        user_id: Optional[str] = None,
        username: str = ANONYMOUS_USERNAME,
    ) -> str:
        """Add a review for a cafe and notify the cafe's subscribers."""
        review_id = uuid.uuid4().hex
        created_at = self._clock().isoformat(timespec="microseconds")

        with self._get_connection() as conn:
            conn.execute(
                """INSERT INTO reviews (id, place_id, text, rating, user_id, username, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (review_id, place_id, text, rating, user_id, username or ANONYMOUS_USERNAME, created_at)
            )

        logger.info(f"Review {review_id} added for cafe {place_id} by {username}")
        self._notify_reviews(place_id)
        return review_id

    def get_reviews(self, place_id: str) -> List[Review]:
        """Get a cafe's reviews, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """SELECT * FROM reviews WHERE place_id = ?
                   ORDER BY created_at DESC, rowid DESC""",
                (place_id,)
            ).fetchall()
            return [self._row_to_review(row) for row in rows]

    def delete_review(self, review_id: str) -> bool:
        """Delete a review. Returns False if it did not exist."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT place_id FROM reviews WHERE id = ?", (review_id,)
            ).fetchone()
            if not row:
                return False
            conn.execute("DELETE FROM reviews WHERE id = ?", (review_id,))

        self._notify_reviews(row["place_id"])
        return True

    def subscribe_reviews(self, place_id: str, callback: ReviewsListener) -> Unsubscribe:
        """Deliver the cafe's review snapshot now and after every change."""
        with self._notify_lock(f"reviews:{place_id}"):
            with self._lock:
                self._review_listeners[place_id].append(callback)
            logger.debug(f"Subscribed to reviews of cafe {place_id}")

            self._deliver(callback, self.get_reviews(place_id))

        def unsubscribe():
            with self._lock:
                listeners = self._review_listeners.get(place_id, [])
                if callback in listeners:
                    listeners.remove(callback)
                    logger.debug(f"Unsubscribed from reviews of cafe {place_id}")

        return unsubscribe

    def _notify_reviews(self, place_id: str):
        with self._notify_lock(f"reviews:{place_id}"):
            with self._lock:
                listeners = list(self._review_listeners.get(place_id, []))
            if not listeners:
                return

            snapshot = self.get_reviews(place_id)
            for callback in listeners:
                self._deliver(callback, list(snapshot))

    def _row_to_review(self, row: sqlite3.Row) -> Review:
        """Convert database row to Review object."""
        return Review(
            id=row["id"],
            text=row["text"] or None,
            rating=row["rating"] or 0,
            user_id=row["user_id"],
            username=row["username"] or ANONYMOUS_USERNAME,
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    # ── Cafes ──────────────────────────────────────────────────────

    def save_cafe(self, cafe: Cafe):
        """Insert or refresh the cafe record supplied by a caller."""
        with self._get_connection() as conn:
            conn.execute(
                """INSERT INTO cafes (place_id, name, vicinity, photo_reference)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(place_id) DO UPDATE SET
                       name = excluded.name,
                       vicinity = excluded.vicinity,
                       photo_reference = excluded.photo_reference""",
                (cafe.place_id, cafe.name, cafe.vicinity, cafe.photo_reference)
            )

    def get_cafe(self, place_id: str) -> Optional[Cafe]:
        """Get cafe record by place id."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM cafes WHERE place_id = ?", (place_id,)
            ).fetchone()
            if not row:
                return None
            return Cafe(
                place_id=row["place_id"],
                name=row["name"] or "",
                vicinity=row["vicinity"] or "",
                photo_reference=row["photo_reference"],
            )

    # ── Users & Friends ────────────────────────────────────────────

    def create_user(self, user_id: str, email: str = "", display_name: str = "") -> bool:
        """Create a user profile. Returns False if the id is taken."""
        try:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT INTO users (id, email, display_name) VALUES (?, ?, ?)",
                    (user_id, email, display_name)
                )
        except sqlite3.IntegrityError:
            logger.warning(f"User {user_id} already exists")
            return False

        self._notify_profile(user_id)
        return True

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        """Get user profile, including friends, by ID."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                return None
            friends = self._select_friends(conn, user_id)
            return UserProfile(
                user_id=row["id"],
                email=row["email"] or "",
                display_name=row["display_name"] or "",
                friends=friends,
            )

    def get_friends(self, user_id: str) -> List[str]:
        """Get the ids of a user's friends, in the order they were added."""
        with self._get_connection() as conn:
            return self._select_friends(conn, user_id)

    def _select_friends(self, conn, user_id: str) -> List[str]:
        rows = conn.execute(
            "SELECT friend_id FROM friendships WHERE user_id = ? ORDER BY rowid",
            (user_id,)
        ).fetchall()
        return [row["friend_id"] for row in rows]

    def add_friend(self, user_id: str, friend_id: str) -> bool:
        """Add friend_id to user_id's friends list. Returns False if already there."""
        if user_id == friend_id:
            return False
        try:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT INTO friendships (user_id, friend_id) VALUES (?, ?)",
                    (user_id, friend_id)
                )
        except sqlite3.IntegrityError:
            return False

        logger.info(f"User {user_id} added friend {friend_id}")
        self._notify_profile(user_id)
        return True

    def remove_friend(self, user_id: str, friend_id: str) -> bool:
        """Remove friend_id from user_id's friends list."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM friendships WHERE user_id = ? AND friend_id = ?",
                (user_id, friend_id)
            )
            removed = cursor.rowcount > 0

        if removed:
            self._notify_profile(user_id)
        return removed

    def subscribe_user(self, user_id: str, callback: ProfileListener) -> Unsubscribe:
        """Deliver the user's profile now (if it exists) and after every change."""
        with self._notify_lock(f"user:{user_id}"):
            with self._lock:
                self._profile_listeners[user_id].append(callback)
            logger.debug(f"Subscribed to profile of user {user_id}")

            profile = self.get_user(user_id)
            if profile:
                self._deliver(callback, profile)

        def unsubscribe():
            with self._lock:
                listeners = self._profile_listeners.get(user_id, [])
                if callback in listeners:
                    listeners.remove(callback)
                    logger.debug(f"Unsubscribed from profile of user {user_id}")

        return unsubscribe

    def _notify_profile(self, user_id: str):
        with self._notify_lock(f"user:{user_id}"):
            with self._lock:
                listeners = list(self._profile_listeners.get(user_id, []))
            if not listeners:
                return

            profile = self.get_user(user_id)
            if not profile:
                return
            for callback in listeners:
                self._deliver(callback, profile)

    def _deliver(self, callback, snapshot):
        """Run one subscriber callback; a failing subscriber never breaks the store."""
        try:
            callback(snapshot)
        except Exception as e:
            logger.exception(f"Snapshot subscriber failed: {e}")


# Quick init helper
def init_database(db_path: str = DATABASE_FILE) -> Database:
    """Create the database file and tables if needed."""
    db = Database(db_path)
    db.init()
    return db
