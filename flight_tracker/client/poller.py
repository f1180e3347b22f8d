"""
List poller - refetches the flight board on a fixed interval.

Runs independently of user actions. A tick that fails leaves the board
in its error view; the next tick (or a manual retry) tries again. There
is no backoff.
"""

import logging
import threading
import time
from typing import Optional

from flight_tracker.config import config
from flight_tracker.client.board import FlightBoard

logger = logging.getLogger(__name__)


class ListPoller:
    """
    Periodic refresh of a FlightBoard.

    Can run in the foreground (run_continuous) or in a daemon thread
    (start_background).
    """

    def __init__(self, board: FlightBoard, interval: Optional[float] = None):
        """
        Args:
            board: Board to refresh
            interval: Seconds between refreshes (POLL_INTERVAL_SECONDS if None)
        """
        self.board = board
        self.interval = interval or config.client.poll_interval

        # State tracking
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_poll_time: float = 0
        self._poll_count: int = 0
        self._error_count: int = 0

    def poll_once(self) -> bool:
        """Execute one refresh. Returns True on success."""
        ok = self.board.refresh()
        self._last_poll_time = time.time()
        self._poll_count += 1
        if not ok:
            self._error_count += 1
        return ok

    def run_continuous(self) -> None:
        """
        Poll until stop() is called, starting immediately.

        This method blocks - use start_background() for non-blocking.
        """
        self._stop_event.clear()
        self._run_loop()

    def _run_loop(self) -> None:
        logger.info(f'Starting flight polling (interval={self.interval}s)')

        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception as e:
                self._error_count += 1
                logger.error(f'Polling error: {e}')
            self._stop_event.wait(self.interval)

        logger.info('Polling stopped')

    def start_background(self) -> None:
        """Start polling in a background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Polling already running')
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
        )
        self._thread.start()
        logger.info('Background polling started')

    def stop(self) -> None:
        """Stop polling. An in-flight request is not aborted."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5)

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    @property
    def stats(self) -> dict:
        """Get polling statistics."""
        return {
            'poll_count': self._poll_count,
            'error_count': self._error_count,
            'last_poll_time': self._last_poll_time,
            'running': self.running,
            'interval': self.interval,
        }
