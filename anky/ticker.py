from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from .decay import WritingSession
from .models import DecayStep, Writing
from .storage import WritingStore, WritingStoreError

logger = logging.getLogger(__name__)

StepCallback = Callable[[DecayStep], None]
ExpiredCallback = Callable[[Writing], None]
ErrorCallback = Callable[[Exception], None]


class KeystrokeMonitor:
    """Ticks a writing session once per interval until it expires or is stopped."""

    def __init__(self, session: WritingSession, store: WritingStore, interval_seconds: float = 1.0):
        self._session = session
        self._store = store
        self._interval_seconds = max(0.01, float(interval_seconds))
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._on_step: StepCallback | None = None
        self._on_expired: ExpiredCallback | None = None
        self._on_error: ErrorCallback | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(
        self,
        on_step: StepCallback | None = None,
        on_expired: ExpiredCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> bool:
        with self._lock:
            if self.is_running:
                return False

            self._on_step = on_step
            self._on_expired = on_expired
            self._on_error = on_error
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run_tick_loop,
                name="anky-keystroke-monitor",
                daemon=True,
            )
            self._thread.start()
            return True

    def stop(self, timeout_seconds: float = 5.0) -> None:
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()

        if thread is not threading.current_thread():
            thread.join(timeout=timeout_seconds)

        with self._lock:
            if self._thread is thread:
                self._thread = None

    def tick_once(self) -> DecayStep | None:
        step = self._session.tick()
        if step is None:
            return None

        if not step.expired:
            logger.debug("Current percentage: %d", step.percentage)
            callback = self._on_step
            if callback is not None:
                callback(step)
            return step

        writing = self._store.save(self._session.text)
        if writing is None:
            error_callback = self._on_error
            if error_callback is not None:
                error_callback(WritingStoreError(f"Could not save writing to {self._store.directory}"))
            return step

        callback = self._on_expired
        if callback is not None:
            callback(writing)
        return step

    def _run_tick_loop(self) -> None:
        next_due = time.monotonic() + self._interval_seconds

        while not self._stop_event.is_set():
            now = time.monotonic()
            if now < next_due:
                if self._stop_event.wait(next_due - now):
                    break

            try:
                step = self.tick_once()
            except Exception as exc:  # noqa: BLE001
                logger.exception("Keystroke monitor tick failed")
                callback = self._on_error
                if callback is not None:
                    callback(exc)
                break

            if step is None or step.expired:
                break

            next_due = max(next_due + self._interval_seconds, time.monotonic() + 0.01)
