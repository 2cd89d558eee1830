"""
Expired session sweep.

Sessions are already treated as dead once expired; the sweep only keeps the
user_sessions table from growing.
"""

import logging
import threading
from typing import Callable, Optional

from sqlalchemy.orm import Session

from .sessions import SessionManager

logger = logging.getLogger(__name__)


def cleanup_expired_sessions(session_factory: Callable[[], Session]) -> int:
    """Delete expired sessions in a fresh database session."""
    db = session_factory()
    try:
        removed = SessionManager(db).cleanup_expired()
    finally:
        db.close()

    if removed:
        logger.info(f"Cleaned up {removed} expired session(s)")
    else:
        logger.debug("No expired sessions to clean up")
    return removed


class SessionSweeper:
    """Background thread running cleanup_expired_sessions every interval."""

    def __init__(self, session_factory: Callable[[], Session], interval_seconds: int):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                cleanup_expired_sessions(self.session_factory)
            except Exception:
                logger.exception("Session cleanup failed")

    def start(self) -> None:
        """Start the sweep thread. Idempotent; an interval of 0 disables it."""
        if self.interval_seconds <= 0:
            logger.info("Session cleanup sweep disabled")
            return
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name="session-sweeper",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Session cleanup sweep scheduled every {self.interval_seconds}s")

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=2)
            if self._thread.is_alive():
                logger.warning("Session sweeper still alive after timeout, continuing shutdown")
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
