"""
Snapshot Channel - Latest-Value Holder per Data Source
======================================================

Each live source (review feed, profile feed, one-shot API fetch) publishes
into its own channel. Readers only ever see the most recent snapshot and
never block; derived values are recomputed from whatever is current.
"""

import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotChannel(Generic[T]):
    """
    Holds the latest snapshot published by one source.

    USAGE:
        reviews = SnapshotChannel("reviews", default=[])
        reviews.publish(store.get_reviews(place_id))
        print(reviews.version, len(reviews.latest))
    """

    def __init__(self, name: str, default: Optional[T] = None):
        self.name = name
        self._value = default
        self._version = 0
        self._lock = threading.Lock()
        self._listeners: List[Callable[[T], None]] = []

    @property
    def latest(self) -> Optional[T]:
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        with self._lock:
            return self._version

    @property
    def has_value(self) -> bool:
        return self.version > 0

    def publish(self, value: T):
        """Replace the held snapshot; the newest publish always wins."""
        with self._lock:
            self._value = value
            self._version += 1
            version = self._version
            listeners = list(self._listeners)

        logger.debug(f"Channel '{self.name}' published version {version}")
        for listener in listeners:
            try:
                listener(value)
            except Exception as e:
                logger.exception(f"Listener on channel '{self.name}' failed: {e}")

    def listen(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Call `callback` with each future snapshot. Returns an unsubscribe function."""
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe
