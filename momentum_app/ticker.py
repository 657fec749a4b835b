"""
Periodic tick source.

Calls a callback once per interval from a daemon thread until stopped.
The callback is expected to serialize itself with other operations.
"""

import threading
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class TickDriver:
    """Schedules a callback every ``interval`` seconds; cancel with ``stop``."""

    def __init__(self, callback: Callable[[], object], interval: float = 1.0,
                 name: str = "momentum-tick"):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.callback = callback
        self.interval = interval
        self.name = name
        self.logger = logger
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start ticking. Starting a running driver does nothing."""
        if self.is_alive:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name=self.name)
        self._thread.start()
        self.logger.debug("Tick driver started", interval=self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop ticking and wait for the thread to finish."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout if timeout is not None else self.interval * 2)
        self._thread = None
        self.logger.debug("Tick driver stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.callback()
            except Exception as e:
                self.logger.error("Tick callback failed", error=str(e), exc_info=True)
