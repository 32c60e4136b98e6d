"""A background thread that drives a motion manager at a fixed period."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional, Protocol

log = logging.getLogger(__name__)


class _Processor(Protocol):
    def process(self) -> None:
        ...


class MotionTimer:
    """Calls ``manager.process()`` every ``interval`` seconds on its own thread.

    Periods are scheduled on absolute monotonic times, so a slow call does not
    shift the following ones.
    """

    def __init__(self, manager: Optional[_Processor], interval: float = 0.008) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.manager = manager
        self.interval = interval
        self._thread: Optional[threading.Thread] = None
        self._finish = threading.Event()
        self._running = False

    def __enter__(self) -> MotionTimer:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _run(self) -> None:
        next_time = time.monotonic()
        while not self._finish.is_set():
            next_time += self.interval
            delay = next_time - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            if self.manager is not None:
                self.manager.process()

    def start(self) -> None:
        """Start the timer thread; does nothing when it already runs."""
        if self._running:
            return
        self._finish.clear()
        thread = threading.Thread(target=self._run, name="motion-timer", daemon=True)
        try:
            thread.start()
        except RuntimeError:
            log.error("Failed to create motion timer thread")
            return
        self._thread = thread
        self._running = True

    def stop(self) -> None:
        """Ask the thread to finish and wait for it."""
        if not self._running:
            return
        self._finish.set()
        if self._thread is not None:
            self._thread.join()
        self._thread = None
        self._running = False

    def is_running(self) -> bool:
        return self._running