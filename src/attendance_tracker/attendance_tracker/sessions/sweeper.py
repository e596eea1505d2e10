from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.constants import DEFAULT_SESSION_SWEEP_SECONDS
from .service import SessionLogService

logger = logging.getLogger(__name__)


class StaleSessionSweeper:
    """Process-lifetime timer running SessionLogService.sweep_stale.

    One daemon thread per process; nothing is persisted, a restart simply
    waits for the next interval.
    """

    def __init__(self, sessions: SessionLogService, *, interval_seconds: float = DEFAULT_SESSION_SWEEP_SECONDS):
        self._sessions = sessions
        self._interval = float(interval_seconds)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        return self._sessions.sweep_stale()

    def _loop(self) -> None:
        while not self._stop.wait(self._interval):
            self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="stale-session-sweeper", daemon=True)
        self._thread.start()
        logger.info("stale session sweeper started (every %ss)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None
