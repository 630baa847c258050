# SPDX-License-Identifier: MIT

import logging
import threading
import time
from typing import Callable, Optional

from punchcard import configuration
from punchcard.errors import PollingFailure, PunchcardError
from punchcard.model.time_entry import TimeEntry

logger = logging.getLogger(__name__)

SnapshotReader = Callable[[], list[TimeEntry]]
SnapshotCallback = Callable[[list[TimeEntry]], object]


class ChangePoller:
    """
    Re-read the entry snapshot on a fixed interval so edits made on other
    devices show up while this one is in use. It only reads; whatever it
    finds is handed to `on_snapshot`.

    Start it when the application becomes active and stop it when it goes
    to the background. Once `stop()` returns no further snapshot is
    delivered.
    """

    def __init__(
        self,
        read_snapshot: SnapshotReader,
        on_snapshot: SnapshotCallback,
        interval_seconds: float = configuration.DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self._read_snapshot = read_snapshot
        self._on_snapshot = on_snapshot
        self._interval_seconds = max(0.05, float(interval_seconds))
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        # Held for the duration of a delivery, so stop() can wait it out
        self._tick_lock = threading.RLock()

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        with self._lock:
            if self.is_running:
                return False

            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run_poll_loop,
                args=(self._stop_event,),
                name="punchcard-change-poller",
                daemon=True,
            )
            self._thread.start()
            logger.debug("change poller started (every %.1fs)", self._interval_seconds)
            return True

    def stop(self, timeout_seconds: float = 5.0) -> None:
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            self._thread = None

        if thread is threading.current_thread():
            # Stopped from inside a delivery; the loop exits on its own
            return

        # Wait for an in-flight delivery, after which the set event blocks
        # any further one
        with self._tick_lock:
            pass
        thread.join(timeout=timeout_seconds)
        logger.debug("change poller stopped")

    def poll_once(self, stop_event: Optional[threading.Event] = None) -> bool:
        """
        Run a single tick. Returns whether a snapshot was delivered. Read
        failures are expected now and then (files mid-sync, folder briefly
        unavailable) and are only logged.
        """
        try:
            snapshot = self._read_snapshot()
        except PunchcardError as e:
            failure = PollingFailure(f"Polling the entry snapshot failed: {e}", e)
            logger.debug("%s", failure)
            return False

        with self._tick_lock:
            if stop_event is not None and stop_event.is_set():
                return False
            self._on_snapshot(snapshot)
            return True

    def _run_poll_loop(self, stop_event: threading.Event) -> None:
        next_due = time.monotonic() + self._interval_seconds

        while not stop_event.is_set():
            now = time.monotonic()
            if now < next_due:
                if stop_event.wait(next_due - now):
                    break

            try:
                self.poll_once(stop_event)
            except Exception:  # noqa: BLE001
                logger.exception("change poller tick failed")

            next_due = max(next_due + self._interval_seconds, time.monotonic() + 0.05)
