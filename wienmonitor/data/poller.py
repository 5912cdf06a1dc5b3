"""Threaded poller that periodically refreshes one dashboard feed."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FeedPoller(Generic[T]):
    """Background poller that refreshes one feed snapshot on a schedule.

    Each poll builds a complete snapshot and replaces the previous one. Polls
    are never cancelled or serialized: `refresh_now()` may overlap a
    scheduled poll, and whichever finishes last wins.
    """

    def __init__(self, name: str, fetch: Callable[[], T], poll_interval_seconds: float) -> None:
        self.name = name
        self._fetch = fetch
        self._poll_interval_seconds = poll_interval_seconds
        self._latest: T | None = None
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def get_latest(self) -> T | None:
        """Return the most recent snapshot, if any."""
        with self._lock:
            return self._latest

    def start(self) -> None:
        """Start the background polling thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name=f"poller-{self.name}", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the polling thread to stop."""
        self._stop_event.set()

    def refresh_now(self) -> threading.Thread:
        """Run one extra poll in its own thread without touching the schedule."""
        thread = threading.Thread(target=self.poll_once, name=f"refresh-{self.name}", daemon=True)
        thread.start()
        return thread

    def poll_once(self) -> T | None:
        try:
            result = self._fetch()
        except Exception:
            logger.exception("Poll of %s feed failed", self.name)
            return None
        with self._lock:
            self._latest = result
        return result

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            self.poll_once()
            self._stop_event.wait(timeout=self._poll_interval_seconds)


__all__ = ["FeedPoller"]
